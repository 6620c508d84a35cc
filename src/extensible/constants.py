# Field metadata key holding the external name of a dataclass field
FIELD_ALIAS_METADATA_KEY = "extensible.alias"

# Decoding defaults
MISMATCH_POLICY_DEFAULT = "fail"
OMIT_NONE_DEFAULT = True

# Naming convention used when no alias is declared
NAMING_DEFAULT = "identity"

# Path shown for the top-level object in error messages
ROOT_PATH = "$"

# Indentation for JSON reports
JSON_INDENT_DEFAULT = 2
