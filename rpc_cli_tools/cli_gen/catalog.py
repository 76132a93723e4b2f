"""Access to the types and resource clients declared in an API description."""
from typing import Any
from typing import Callable
from typing import Optional

from rpc_cli_tools.cli_gen._logging import logger
from rpc_cli_tools.cli_gen.constants import GENERATOR_LOG_CLASS
from rpc_cli_tools.cli_gen.model import GeneratorConfig
from rpc_cli_tools.cli_gen.model import OperationDescriptor
from rpc_cli_tools.cli_gen.model import ParameterDescriptor
from rpc_cli_tools.cli_gen.model import TypeDescriptor
from rpc_cli_tools.cli_gen.utils import capitalize
from rpc_cli_tools.cli_gen.utils import to_snake_case
from rpc_cli_tools.types import AuthMode
from rpc_cli_tools.types import DescField
from rpc_cli_tools.types import OperationKind
from rpc_cli_tools.utils import is_void
from rpc_cli_tools.utils import open_description

CLIENT_SUFFIX = "Client"
UPDATE_PREFIXES = ("update", "patch", "edit", "modify", "replace")


class UnresolvedTypeError(Exception):
    """The declared type cannot be turned into command line flags."""

    def __init__(self, type_name: str, reason: str = "unknown type"):
        self.type_name = type_name
        self.reason = reason
        super().__init__(f"unable to resolve {type_name}: {reason}")


class MissingArtifactError(Exception):
    """A required piece of the API description is missing."""


def operation_kind(name: str, declared: Optional[str] = None) -> OperationKind:
    """Get the explicitly declared kind, or infer it from the operation name."""
    if declared:
        return OperationKind(str(declared).lower())

    snake = to_snake_case(name)
    if snake.startswith(UPDATE_PREFIXES):
        return OperationKind.UPDATE
    return OperationKind.CREATE


def group_name(resource_name: str, resource_suffix: Optional[str] = None) -> str:
    """Strip the `<suffix>Client` from the resource client name."""
    for suffix in (f"{resource_suffix or ''}{CLIENT_SUFFIX}", CLIENT_SUFFIX):
        if resource_name.endswith(suffix) and resource_name != suffix:
            return resource_name[:-len(suffix)]
    return resource_name


class TypeCatalog:
    """Wraps the parsed API description with lookups for the generation passes."""

    def __init__(self, description: dict[str, Any]):
        self.description = description or {}
        self.types = self.description.get(DescField.TYPES) or {}
        self.models = self.description.get(DescField.MODELS) or {}
        self.logger = logger(GENERATOR_LOG_CLASS)

    def type_data(self, name: str) -> Optional[dict[str, Any]]:
        """Get the declaration for the named type (if any)."""
        return self.types.get(name)

    def type_module(self, name: str) -> Optional[str]:
        """Get the module the named type is imported from."""
        data = self.type_data(name) or {}
        return data.get(DescField.MODULE) or self.models.get(DescField.MODULE)

    def client(self) -> dict[str, Any]:
        client = self.description.get(DescField.CLIENT) or {}
        missing = [k.value for k in (DescField.MODULE, DescField.NAME) if not client.get(k)]
        if missing:
            raise MissingArtifactError(f"client section is missing: {', '.join(missing)}")
        return client

    def resources(self) -> dict[str, Any]:
        resources = self.description.get(DescField.RESOURCES) or {}
        if not resources:
            raise MissingArtifactError("no resource clients found in resources section")
        return resources

    def generator_defaults(self) -> dict[str, Any]:
        return self.description.get(DescField.GENERATOR) or {}

    def config(
        self,
        package_name: str,
        cmdline_name: Optional[str] = None,
        auth: Optional[AuthMode] = None,
    ) -> GeneratorConfig:
        """Create the run configuration from the description, with the overrides applied."""
        client = self.client()
        defaults = self.generator_defaults()
        config = GeneratorConfig(
            package_name=package_name,
            client_module=client.get(DescField.MODULE),
            client_name=client.get(DescField.NAME),
            model_module=self.models.get(DescField.MODULE),
        )
        config.cmdline_name = cmdline_name or defaults.get(DescField.CMD_LINE_NAME) or config.cmdline_name
        config.auth = AuthMode(auth or defaults.get(DescField.AUTH) or config.auth)
        if DescField.MODEL_SUFFIX.value in defaults:
            config.model_suffix = defaults.get(DescField.MODEL_SUFFIX)
        config.resource_suffix = defaults.get(DescField.RESOURCE_SUFFIX)
        return config

    def operations(
        self,
        resolve: Callable[[str], Optional[TypeDescriptor]],
        resource_suffix: Optional[str] = None,
    ) -> list[OperationDescriptor]:
        """
        Get the operation descriptors for all resource clients, in declaration order.

        The `resolve` callable turns declared parameter types into descriptors, and returns
        None for the ones that cannot be used.
        """
        result = []
        for resource_name, resource_data in self.resources().items():
            group = capitalize(group_name(resource_name, resource_suffix))
            accessor = (resource_data or {}).get(DescField.ACCESSOR) or group.lower()
            for op_data in (resource_data or {}).get(DescField.OPERATIONS) or []:
                name = op_data.get(DescField.NAME)
                if not name:
                    self.logger.warning(f"Skipping unnamed operation in {resource_name}")
                    continue

                parameters = []
                for param in op_data.get(DescField.PARAMS) or []:
                    declared = str(param.get(DescField.TYPE, ""))
                    parameters.append(ParameterDescriptor(
                        name=param.get(DescField.NAME),
                        declared_type=declared,
                        type=resolve(declared),
                        is_path_identifier=bool(param.get(DescField.PATH, False)),
                    ))

                returns = op_data.get(DescField.RETURNS)
                result.append(OperationDescriptor(
                    name=name,
                    resource_group=group,
                    parameters=tuple(parameters),
                    return_type=None if is_void(returns) else str(returns),
                    kind=operation_kind(name, op_data.get(DescField.KIND)),
                    summary=op_data.get(DescField.SUMMARY) or "",
                    accessor=accessor,
                ))

        return result


def open_catalog(filename: str) -> TypeCatalog:
    """Open the description file, and wrap it in a catalog."""
    return TypeCatalog(open_description(filename))
