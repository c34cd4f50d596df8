# demo_mcp_list_operations.py
# Version: v1
#
# Demo: call the MCP-style list_operations / describe_operation tasks
# directly and print results.
#
# Usage:
#
#   export STS_MOCK_MODE=1
#   python demo_mcp_list_operations.py

import asyncio
from typing import Any, Dict, List

from sts_query.tools import tasks


async def main() -> None:
    print("Calling MCP task: list_operations()")
    result: Dict[str, Any] = await tasks.list_operations()

    names: List[str] = result.get("operations", [])
    print(f"Operations returned: {len(names)} (API {result.get('api_version')})")

    for name in names:
        described = await tasks.describe_operation(name)
        op = described.get("operation", {})
        print(f"- {name}  required={op.get('required')}  optional={op.get('optional')}")


if __name__ == "__main__":
    asyncio.run(main())
