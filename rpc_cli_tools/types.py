from enum import Enum


class DescField(str, Enum):
    """Field names used in the API description file."""

    ACCESSOR = "accessor"
    AUTH = "authentication"
    CLIENT = "client"
    CMD_LINE_NAME = "cmdline_name"
    CONSTRUCTION = "construction"
    ENUM = "enum"
    FIELDS = "fields"
    FROM_STRING = "from_string"
    GENERATOR = "generator"
    IDENTIFIER = "identifier"
    KIND = "kind"
    MODELS = "models"
    MODEL_SUFFIX = "model_suffix"
    MODULE = "module"
    NAME = "name"
    OPERATIONS = "operations"
    PARAMS = "parameters"
    PATH = "path"
    REQUIRED = "required"
    RESOURCES = "resources"
    RESOURCE_SUFFIX = "resource_suffix"
    RETURNS = "returns"
    STATIC = "static"
    SUMMARY = "summary"
    TYPE = "type"
    TYPES = "types"


class TypeKind(str, Enum):
    SCALAR = "scalar"
    ENUM = "enum"
    SCALAR_COLLECTION = "scalar-collection"
    COMPOSITE = "composite"
    COMPOSITE_COLLECTION = "composite-collection"


class OperationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class ConstructionStyle(str, Enum):
    BUILDER = "builder"
    SETTER = "setter"


class AuthMode(str, Enum):
    NONE = "none"
    BASIC = "basic"
    SIGNATURE = "signature"


class ManifestField(str, Enum):
    """Field names used in the generated commands manifest."""

    CLASS = "class"
    COMMANDS = "commands"
    ENUM = "enum"
    FLAGS = "flags"
    FUNCTION = "function"
    HELP = "help"
    MODULE = "module"
    NAME = "name"
    OPTION = "option"
    PATH = "path"
    POSITIONAL = "positional"
    REQUIRED = "required"
    TYPE = "type"
