from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

customization_type_validator = RegexValidator(
    regex=r"^[a-z][a-z0-9_]*$",
    message=_("Use lowercase letters, digits and underscores, starting with a letter (e.g. 'remove_cheese')."),
)


class MenuItem(models.Model):
    name = models.CharField(max_length=200, help_text=_("Name of the menu item."))
    description = models.TextField(
        blank=True, help_text=_("Customer-facing description.")
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text=_("Base selling price. Orders store their own snapshot."),
    )
    category = models.CharField(
        max_length=100,
        help_text=_("Category label used to group the menu, e.g. 'Burgers'."),
    )
    available = models.BooleanField(
        default=True,
        db_index=True,
        help_text=_("Unavailable items stay on historical orders but cannot be ordered."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["category", "name"]
        verbose_name = _("Menu Item")
        verbose_name_plural = _("Menu Items")
        indexes = [
            models.Index(fields=["available", "category"], name="menuitem_avail_cat_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.category})"


class CustomizationTemplate(models.Model):
    """
    A customization a menu item offers, e.g. 'remove_cheese' or 'extra_patty'.

    Orders copy the name and price delta when they are placed.
    """

    menu_item = models.ForeignKey(
        MenuItem, on_delete=models.CASCADE, related_name="customizations"
    )
    type = models.CharField(
        max_length=50,
        validators=[customization_type_validator],
        help_text=_("Machine key clients send when ordering."),
    )
    name = models.CharField(max_length=100, help_text=_("Display name."))
    price_delta = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        help_text=_("Amount added to (or subtracted from) the item price."),
    )

    class Meta:
        ordering = ["menu_item", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["menu_item", "type"],
                name="unique_customization_type_per_item",
            ),
        ]

    def __str__(self):
        return f"{self.menu_item.name} - {self.name}"
