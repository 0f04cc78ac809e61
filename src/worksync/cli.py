"""WorkSync Command Line Interface.

Provides operational tools for:
- Schema creation
- Owed-amount and unpaid-entry queries
- Payment approval

Usage:
    worksync init-db
    worksync owed e@x.com
    worksync unpaid e@x.com
    worksync approve 7c1e...-... --by hr-1
    worksync serve
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any

from worksync.config import Settings, configure_logging, get_settings
from worksync.errors import WorkSyncError
from worksync.payroll import Payroll

logger = logging.getLogger(__name__)


def _dump(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


class WorkSyncCli:
    """WorkSync Command Line Interface."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="worksync",
            description="WorkSync payroll operational tools",
        )
        parser.add_argument(
            "--database-url",
            help="Override DATABASE_URL",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser("serve", help="Run the HTTP API under uvicorn")
        subparsers.add_parser("init-db", help="Create tables and indexes")

        owed = subparsers.add_parser("owed", help="Show what an employee is owed")
        owed.add_argument("email", help="Employee email")

        unpaid = subparsers.add_parser("unpaid", help="List an employee's unpaid entries")
        unpaid.add_argument("email", help="Employee email")

        approve = subparsers.add_parser("approve", help="Mark a pending payment as paid")
        approve.add_argument("payment_id", help="Payment record ID")
        approve.add_argument("--by", dest="changed_by", help="Approver identifier")

        return parser

    def run(self, argv: list[str] | None = None) -> int:
        """Run CLI with given arguments."""
        args = self.parser.parse_args(argv)

        if args.command is None:
            self.parser.print_help()
            return 1

        settings = self.settings or get_settings()
        if args.database_url:
            settings = replace(settings, database_url=args.database_url)
        configure_logging(settings.log_level)

        if args.command == "serve":
            from worksync.__main__ import main as serve

            if args.database_url:
                os.environ["DATABASE_URL"] = args.database_url
                get_settings.cache_clear()

            serve()
            return 0

        handlers: dict[str, Callable[[Payroll, argparse.Namespace], Awaitable[int]]] = {
            "init-db": self._cmd_init_db,
            "owed": self._cmd_owed,
            "unpaid": self._cmd_unpaid,
            "approve": self._cmd_approve,
        }
        return asyncio.run(self._run_with_payroll(settings, handlers[args.command], args))

    async def _run_with_payroll(
        self,
        settings: Settings,
        handler: Callable[[Payroll, argparse.Namespace], Awaitable[int]],
        args: argparse.Namespace,
    ) -> int:
        payroll = Payroll.from_settings(settings)
        try:
            return await handler(payroll, args)
        except WorkSyncError as exc:
            print(f"Error ({exc.code}): {exc}", file=sys.stderr)
            return 1
        finally:
            await payroll.close()

    async def _cmd_init_db(self, payroll: Payroll, args: argparse.Namespace) -> int:
        await payroll.db.create_schema()
        logger.info("Schema created")
        return 0

    async def _cmd_owed(self, payroll: Payroll, args: argparse.Namespace) -> int:
        snapshot = await payroll.compute_owed(args.email)
        _dump(snapshot.to_dict())
        return 0

    async def _cmd_unpaid(self, payroll: Payroll, args: argparse.Namespace) -> int:
        entries = await payroll.list_unpaid_entries(args.email)
        _dump([e.snapshot() for e in entries])
        return 0

    async def _cmd_approve(self, payroll: Payroll, args: argparse.Namespace) -> int:
        payment = await payroll.set_payment_status(
            args.payment_id, "paid", changed_by=args.changed_by
        )
        _dump(
            {
                "payment_id": payment.payment_id,
                "employee_email": payment.employee_email,
                "amount": payment.amount,
                "status": payment.status,
                "paid_at": payment.paid_at,
            }
        )
        return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    return WorkSyncCli().run(argv)


if __name__ == "__main__":
    sys.exit(main())
