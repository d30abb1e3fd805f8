import uuid
from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Order(models.Model):
    # --- Status Fields ---
    class OrderStatus(models.TextChoices):
        PENDING = "PENDING", _("Pending")  # Placed, not started
        PREPARING = "PREPARING", _("Preparing")  # In the kitchen
        READY = "READY", _("Ready")  # Waiting for pickup
        COMPLETED = "COMPLETED", _("Completed")  # Handed over
        CANCELLED = "CANCELLED", _("Cancelled")

    class PaymentMethod(models.TextChoices):
        CASH = "CASH", _("Cash")
        CARD = "CARD", _("Card")
        TERMINAL = "TERMINAL", _("Tap to Pay Terminal")

    class OrderType(models.TextChoices):
        IN_STORE = "IN_STORE", _("In Store")
        ONLINE = "ONLINE", _("Online")

    ACTIVE_STATUSES = (OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY)
    TERMINAL_STATUSES = (OrderStatus.COMPLETED, OrderStatus.CANCELLED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.IntegerField(
        unique=True,
        help_text=_("Sequential number shown to customers and the kitchen."),
    )
    status = models.CharField(
        max_length=10, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )
    payment_method = models.CharField(
        max_length=10, choices=PaymentMethod.choices, default=PaymentMethod.CASH
    )
    order_type = models.CharField(
        max_length=10, choices=OrderType.choices, default=OrderType.IN_STORE
    )

    # --- Relationships ---
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    customer_name = models.CharField(max_length=150, blank=True, null=True)

    # --- Financial Fields (cached from OrderCalculator) ---
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    surcharge = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        help_text=_("Card processing fee; zero for cash orders."),
    )
    total = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    # --- External references ---
    payment_reference = models.CharField(
        max_length=255, blank=True, null=True,
        help_text=_("Payment gateway reference once the card payment is captured."),
    )
    terminal_checkout_reference = models.CharField(
        max_length=255, blank=True, null=True,
    )

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "order_number"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["status", "created_at"], name="order_stat_created_idx"),
            models.Index(fields=["customer", "-created_at"], name="order_cust_created_idx"),
            models.Index(fields=["completed_at"], name="order_completed_idx"),
        ]

    def __str__(self):
        return f"Order #{self.order_number} ({self.order_type}) - {self.status}"

    @property
    def is_paid(self):
        return self.payment_method == self.PaymentMethod.CASH or bool(self.payment_reference)


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        "menu.MenuItem", on_delete=models.PROTECT, related_name="order_items"
    )
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Menu price at the time the order was placed."),
    )

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity} of {self.menu_item.name} in Order #{self.order.order_number}"

    @property
    def total_price(self):
        deltas = sum(c.price_delta for c in self.customizations.all())
        return (self.unit_price + deltas) * self.quantity


class OrderItemCustomization(models.Model):
    order_item = models.ForeignKey(
        OrderItem, on_delete=models.CASCADE, related_name="customizations"
    )
    type = models.CharField(max_length=50)
    name = models.CharField(max_length=100)
    price_delta = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} ({self.price_delta})"
