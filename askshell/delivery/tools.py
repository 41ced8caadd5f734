"""Running the external helper tools delivery depends on."""

import subprocess
from typing import List, Optional

from ..constants import HELPER_TOOL_TIMEOUT
from ..errors import InjectionBackendUnavailable
from ..utils.helpers import tool_available


def run_tool(args: List[str], input_data: Optional[bytes] = None, capture: bool = False) -> bytes:
    """Run a helper tool and return its raw stdout.

    Data stays bytes both ways, so clipboard contents in any encoding survive
    a read and write back unchanged.

    Output that is not captured goes to /dev/null: clipboard owners such as
    xclip and wl-copy keep running in the background and would otherwise hold
    our pipes open.

    Raises:
        InjectionBackendUnavailable: tool missing, failing, or hanging
    """
    if not tool_available(args[0]):
        raise InjectionBackendUnavailable(f"'{args[0]}' is not installed")

    try:
        result = subprocess.run(
            args,
            input=input_data,
            stdout=subprocess.PIPE if capture else subprocess.DEVNULL,
            stderr=subprocess.PIPE if capture else subprocess.DEVNULL,
            timeout=HELPER_TOOL_TIMEOUT
        )
    except subprocess.TimeoutExpired as e:
        raise InjectionBackendUnavailable(f"'{args[0]}' timed out") from e
    except OSError as e:
        raise InjectionBackendUnavailable(f"'{args[0]}' could not run: {e}") from e

    if result.returncode != 0:
        detail = (result.stderr or b"").decode("utf-8", "replace").strip() if capture else ""
        message = f"'{args[0]}' exited with code {result.returncode}"
        raise InjectionBackendUnavailable(f"{message}: {detail}" if detail else message)

    return result.stdout if capture else b""
