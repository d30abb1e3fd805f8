import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("menu", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_number", models.IntegerField(help_text="Sequential number shown to customers and the kitchen.", unique=True)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("PREPARING", "Preparing"), ("READY", "Ready"), ("COMPLETED", "Completed"), ("CANCELLED", "Cancelled")], default="PENDING", max_length=10)),
                ("payment_method", models.CharField(choices=[("CASH", "Cash"), ("CARD", "Card"), ("TERMINAL", "Tap to Pay Terminal")], default="CASH", max_length=10)),
                ("order_type", models.CharField(choices=[("IN_STORE", "In Store"), ("ONLINE", "Online")], default="IN_STORE", max_length=10)),
                ("customer_name", models.CharField(blank=True, max_length=150, null=True)),
                ("subtotal", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("surcharge", models.DecimalField(decimal_places=2, default=0, help_text="Card processing fee; zero for cash orders.", max_digits=10)),
                ("total", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("payment_reference", models.CharField(blank=True, help_text="Payment gateway reference once the card payment is captured.", max_length=255, null=True)),
                ("terminal_checkout_reference", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("customer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "ordering": ["-created_at", "order_number"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="order_stat_created_idx"),
                    models.Index(fields=["customer", "-created_at"], name="order_cust_created_idx"),
                    models.Index(fields=["completed_at"], name="order_completed_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("unit_price", models.DecimalField(decimal_places=2, help_text="Menu price at the time the order was placed.", max_digits=10)),
                ("menu_item", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="order_items", to="menu.menuitem")),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order")),
            ],
            options={
                "verbose_name": "Order Item",
                "verbose_name_plural": "Order Items",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="OrderItemCustomization",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(max_length=50)),
                ("name", models.CharField(max_length=100)),
                ("price_delta", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("order_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="customizations", to="orders.orderitem")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
