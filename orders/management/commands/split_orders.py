from django.core.management.base import BaseCommand, CommandError

from core.errors import DomainError
from orders.models import VOID_STATUSES, Order
from orders.services.splitting import split_order


class Command(BaseCommand):
    help = "Split orders whose items have not been assigned to vendor orders yet."

    def add_arguments(self, parser):
        parser.add_argument("--order-id", type=int, help="Split only this order")
        parser.add_argument("--limit", type=int, default=500)
        parser.add_argument("--dry-run", action="store_true", help="List candidate orders without writing")

    def handle(self, *args, **opts):
        if opts.get("order_id"):
            order_ids = [opts["order_id"]]
        else:
            order_ids = list(
                Order.objects.filter(
                    items__isnull=False, items__vendor_order__isnull=True, vendor_orders__isnull=True
                )
                .exclude(status__in=VOID_STATUSES)
                .distinct()
                .order_by("id")
                .values_list("id", flat=True)[: opts["limit"]]
            )

        if opts["dry_run"]:
            self.stdout.write(f"would split {len(order_ids)} order(s): {order_ids}")
            return

        split = failed = 0
        for oid in order_ids:
            try:
                vendor_orders = split_order(oid)
            except DomainError as e:
                failed += 1
                self.stdout.write(self.style.WARNING(f"[!] order {oid}: {e.kind}/{e.code}: {e}"))
                continue
            split += 1
            self.stdout.write(self.style.SUCCESS(f"[✓] order {oid} → {len(vendor_orders)} vendor order(s)"))

        self.stdout.write(f"split={split} failed={failed}")
        if opts.get("order_id") and failed:
            raise CommandError(f"order {opts['order_id']} could not be split")
