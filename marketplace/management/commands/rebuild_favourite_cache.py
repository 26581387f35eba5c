import logging

from django.core.management.base import BaseCommand, CommandError

from infrastructure.container import container

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Recomputes Item.favourited_by from Favorite records."

    def add_arguments(self, parser):
        parser.add_argument("--item", dest="item_id", help="Only rebuild this item (UUID)")

    def handle(self, *args, **options):
        item_id = options.get("item_id")
        self.stdout.write(self.style.SUCCESS("Rebuilding favourite cache..."))

        result = container.favorite_service().rebuild_favourite_cache(item_id)
        if not result.ok:
            raise CommandError(result.error_detail)

        checked = result.value["items_checked"]
        repaired = result.value["items_repaired"]
        style = self.style.WARNING if repaired else self.style.SUCCESS
        self.stdout.write(style(f"Checked {checked} items, repaired {repaired}."))
