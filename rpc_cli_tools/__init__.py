"""Generate Typer command line programs from a typed description of a client API."""
from rpc_cli_tools.utils import is_void
from rpc_cli_tools.utils import open_description
from rpc_cli_tools.utils import parse_type_name
