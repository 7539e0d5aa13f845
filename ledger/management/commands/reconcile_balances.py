from django.core.management.base import BaseCommand

from ledger.models import LedgerEntry, VendorBalance
from ledger.services import get_balance, recompute_balance, repair_balance


class Command(BaseCommand):
    help = "Compare vendor balances with their ledger journal and optionally repair drift."

    def add_arguments(self, parser):
        parser.add_argument("--vendor-id", type=int, help="Only check this vendor")
        parser.add_argument("--fix", action="store_true", help="Overwrite drifted balances with the journal value")

    def handle(self, *args, **opts):
        vendor_ids = set(VendorBalance.objects.values_list("vendor_id", flat=True))
        vendor_ids |= set(LedgerEntry.objects.values_list("vendor_id", flat=True).distinct())
        if opts.get("vendor_id"):
            vendor_ids &= {opts["vendor_id"]}

        drifted = 0
        for vid in sorted(vendor_ids):
            stored = get_balance(vid)
            expected = recompute_balance(vid)
            if stored == expected:
                continue
            drifted += 1
            self.stdout.write(
                self.style.WARNING(f"[!] vendor {vid}: balance {stored} != journal {expected}")
            )
            if opts.get("fix"):
                _, new = repair_balance(vid)
                self.stdout.write(self.style.SUCCESS(f"[✓] vendor {vid}: balance set to {new}"))

        self.stdout.write(f"checked={len(vendor_ids)} drifted={drifted}")
