"""Seed a small catalog for local development.

Re-running is idempotent: categories and products are matched by slug, and
opening stock is only booked for products created by this run.
"""

from decimal import Decimal

from catalog.models import Category, Product
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.text import slugify
from inventory.services import restock

CATEGORIES = [
    ("Outerwear", "Jackets and coats"),
    ("Denim", "Jeans and denim shirts"),
    ("Accessories", "Bags, belts and scarves"),
]

PRODUCTS = [
    ("Vintage Denim Jacket", "Outerwear", "45.00", 12),
    ("Wool Overcoat", "Outerwear", "89.50", 4),
    ("Straight Leg Jeans", "Denim", "32.00", 20),
    ("Leather Belt", "Accessories", "15.00", 30),
    ("Silk Scarf", "Accessories", "22.00", 0),
]


class Command(BaseCommand):
    help = "Seed categories and products with opening stock"

    @transaction.atomic
    def handle(self, *args, **options):
        categories = {}
        for order, (name, description) in enumerate(CATEGORIES):
            cat, _ = Category.objects.get_or_create(
                slug=slugify(name),
                defaults={"name": name, "description": description, "sort_order": order},
            )
            categories[name] = cat

        created = 0
        for name, category, price, stock in PRODUCTS:
            product, was_created = Product.objects.get_or_create(
                slug=slugify(name),
                defaults={"name": name, "category": categories[category], "price": Decimal(price)},
            )
            if was_created:
                created += 1
                if stock:
                    restock(product_id=product.id, quantity=stock, reason="opening stock", reference="seed")

        self.stdout.write(self.style.SUCCESS(f"Seeded {len(categories)} categories and {created} new products."))
