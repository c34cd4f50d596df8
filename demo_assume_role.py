# demo_assume_role.py
# Version: v1
#
# Demo: call AssumeRole through the generic invoke entry point and print the
# temporary credentials (secret parts masked).
#
# Usage:
#
#   export STS_MOCK_MODE=1        # or real AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY
#   python demo_assume_role.py arn:aws:iam::123456789012:role/demo

import sys

from sts_query import StsClient, Success


def main() -> None:
    role_arn = sys.argv[1] if len(sys.argv) > 1 else "arn:aws:iam::123456789012:role/demo"

    client = StsClient()
    print(f"Operations available ({client.api_version}): {', '.join(client.operations())}")

    outcome = client.invoke(
        "AssumeRole",
        {"role_arn": role_arn, "role_session_name": "demo-session", "duration_seconds": 900},
    )

    if not isinstance(outcome, Success):
        print(f"AssumeRole failed after {outcome.attempts} attempt(s): {outcome.error}")
        sys.exit(1)

    creds = outcome.data["credentials"]
    print(f"Request id:    {outcome.request_id}")
    print(f"Access key id: {creds['access_key_id']}")
    print(f"Secret key:    {creds['secret_access_key'][:4]}...")
    print(f"Expires at:    {creds['expiration'].isoformat()}")

    user = outcome.data.get("assumed_role_user", {})
    print(f"Assumed role:  {user.get('arn')}")


if __name__ == "__main__":
    main()
