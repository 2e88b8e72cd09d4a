"""Management command to verify the points ledger invariants."""

from django.core.management.base import BaseCommand, CommandError

from rewardman.models import Account
from rewardman.services import ledger


class Command(BaseCommand):
    help = "Check that every account's balance equals the sum of its ledger entries"

    def add_arguments(self, parser):
        parser.add_argument(
            "--account",
            default=None,
            help="Only audit this account code",
        )

    def handle(self, *args, **options):
        codes = Account.objects.order_by("code").values_list("code", flat=True)
        if options["account"]:
            codes = codes.filter(code=options["account"])
            if not codes.exists():
                raise CommandError(f"Account {options['account']} not found.")

        failed = 0
        checked = 0
        for code in codes:
            checked += 1
            audit = ledger.verify(code)
            if audit.ok:
                continue
            failed += 1
            self.stderr.write(f"{code}: balance {audit.balance}, sum {audit.entries_sum}")
            for problem in audit.problems:
                self.stderr.write(f"  - {problem}")

        if failed:
            raise CommandError(f"{failed} of {checked} accounts have inconsistent ledgers.")

        self.stdout.write(self.style.SUCCESS(f"Ledger consistent for {checked} accounts."))
