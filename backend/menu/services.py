import logging
from typing import Any, Dict, List

from orders.calculators import PricedCustomization, PricedLine
from orders.exceptions import MenuItemNotFoundError, OrderValidationError
from .models import MenuItem

logger = logging.getLogger(__name__)


class MenuService:
    @staticmethod
    def get_public_menu():
        """Available items with their customization templates, grouped by category."""
        return (
            MenuItem.objects.filter(available=True)
            .prefetch_related("customizations")
            .order_by("category", "name")
        )

    @staticmethod
    def resolve_lines(items: List[Dict[str, Any]]) -> List[PricedLine]:
        """
        Turn client line items into priced lines using the current catalog.

        Each item is `{"menu_item_id", "quantity", "customizations": [type, ...]}`.
        Menu items must exist and be available; customization types must be
        registered on that item. Prices and names are snapshotted from the catalog.
        """
        if not items:
            raise OrderValidationError("An order needs at least one item.")

        menu_item_ids = {item["menu_item_id"] for item in items}
        menu_items = {
            menu_item.id: menu_item
            for menu_item in MenuItem.objects.filter(
                id__in=menu_item_ids, available=True
            ).prefetch_related("customizations")
        }

        lines = []
        for item in items:
            menu_item = menu_items.get(item["menu_item_id"])
            if menu_item is None:
                raise MenuItemNotFoundError(
                    f"Menu item {item['menu_item_id']} does not exist or is unavailable.",
                    details={"menu_item_id": item["menu_item_id"]},
                )

            templates = {template.type: template for template in menu_item.customizations.all()}
            customizations = []
            for customization_type in item.get("customizations") or []:
                template = templates.get(customization_type)
                if template is None:
                    raise OrderValidationError(
                        f"'{customization_type}' is not a customization of {menu_item.name}.",
                        details={
                            "menu_item_id": menu_item.id,
                            "type": customization_type,
                            "allowed": sorted(templates),
                        },
                    )
                customizations.append(
                    PricedCustomization(
                        type=template.type,
                        name=template.name,
                        price_delta=template.price_delta,
                    )
                )

            lines.append(
                PricedLine(
                    menu_item_id=menu_item.id,
                    name=menu_item.name,
                    quantity=item.get("quantity", 1),
                    unit_price=menu_item.price,
                    customizations=customizations,
                )
            )

        return lines
