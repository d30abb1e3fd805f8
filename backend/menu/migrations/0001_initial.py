import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Name of the menu item.", max_length=200)),
                ("description", models.TextField(blank=True, help_text="Customer-facing description.")),
                ("price", models.DecimalField(decimal_places=2, help_text="Base selling price. Orders store their own snapshot.", max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("category", models.CharField(help_text="Category label used to group the menu, e.g. 'Burgers'.", max_length=100)),
                ("available", models.BooleanField(db_index=True, default=True, help_text="Unavailable items stay on historical orders but cannot be ordered.")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Menu Item",
                "verbose_name_plural": "Menu Items",
                "ordering": ["category", "name"],
                "indexes": [models.Index(fields=["available", "category"], name="menuitem_avail_cat_idx")],
            },
        ),
        migrations.CreateModel(
            name="CustomizationTemplate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(help_text="Machine key clients send when ordering.", max_length=50, validators=[django.core.validators.RegexValidator(message="Use lowercase letters, digits and underscores, starting with a letter (e.g. 'remove_cheese').", regex="^[a-z][a-z0-9_]*$")])),
                ("name", models.CharField(help_text="Display name.", max_length=100)),
                ("price_delta", models.DecimalField(decimal_places=2, default=0, help_text="Amount added to (or subtracted from) the item price.", max_digits=10)),
                ("menu_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="customizations", to="menu.menuitem")),
            ],
            options={
                "ordering": ["menu_item", "name"],
                "constraints": [models.UniqueConstraint(fields=("menu_item", "type"), name="unique_customization_type_per_item")],
            },
        ),
    ]
