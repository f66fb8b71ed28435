"""Register a principal (if needed) and print a bearer token for it.

Identity is owned by an external subsystem; this helper exists for local
development and manual API testing.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Issue a data room bearer token.")
    parser.add_argument("email", help="Principal e-mail address.")
    parser.add_argument("--name", default=None, help="Display name for a new principal.")
    parser.add_argument("--minutes", type=int, default=None, help="Token lifetime in minutes.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root / "dataroom" / "src"))

    from dataroom_api.auth.service import create_access_token
    from dataroom_api.db.migrations import upgrade_database
    from dataroom_api.db.models import PrincipalRecord
    from dataroom_api.db.session import run_in_session
    from dataroom_api.repo.principals import PrincipalRepository

    upgrade_database()
    repo = PrincipalRepository()

    def _ensure(session) -> tuple[str, str]:
        record = repo.get_by_email(args.email, session=session)
        if record is None:
            record = repo.save(
                PrincipalRecord(email=args.email.strip(), display_name=args.name, verified=True),
                session=session,
            )
            session.flush()
        return record.id, record.email

    principal_id, email = run_in_session(_ensure)
    token, _ = create_access_token(principal_id, email=email, expires_minutes=args.minutes)
    print(f"principal: {principal_id}")
    print(f"token: {token}")


if __name__ == "__main__":
    main()
