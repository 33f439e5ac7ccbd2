import os
import random
from datetime import date, timedelta

# Add 'backend' folder to Python path
import sys
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models.cart import Cart
from models.category import Category
from models.order import Order
from models.payment import Payment, PAYMENT_STATUSES
from models.product import Product, ProductImage
from models.review import Review
from models.store import Store
from models.users import User
from repositories.user import UserRepository

# Configuration
ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin12345")
CUSTOMER_PASSWORD = "password123"
STORES = [("Corner Books", "Warsaw"), ("Gadget Hub", "Krakow"), ("Green Garden", "Gdansk"), ("Home & Co", "Warsaw")]
CATEGORIES = ["Books", "Electronics", "Garden", "Home", "Toys"]
PRODUCTS_PER_STORE = 8
CUSTOMERS = 10
ORDER_DATE_START = date(2024, 1, 1)
# End Configuration


def seed_users(session):
    """Creates the admin, one seller and demo customers; existing e-mails are skipped."""
    repo = UserRepository(session)

    if repo.find_by_email(ADMIN_EMAIL) is None:
        repo.create(
            {"name": "Administrator", "email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
            role_names=("admin",),
        )
    if repo.find_by_email("seller@example.com") is None:
        repo.create(
            {"name": "Demo Seller", "email": "seller@example.com", "password": CUSTOMER_PASSWORD},
            role_names=("seller",),
        )

    customers = []
    for i in range(1, CUSTOMERS + 1):
        email = f"customer{i}@example.com"
        user = repo.find_by_email(email)
        if user is None:
            user = repo.create({
                "name": f"Customer {i}",
                "email": email,
                "password": CUSTOMER_PASSWORD,
                "address": f"{random.randint(1, 200)} Market Street",
            })
        customers.append(user)
    return customers


def seed_catalog(session):
    """Stores, categories, products and their gallery images."""
    categories = [Category(name=name) for name in CATEGORIES]
    stores = [Store(name=name, city=city) for name, city in STORES]
    session.add_all(categories + stores)
    session.flush()

    products = []
    for store in stores:
        for n in range(1, PRODUCTS_PER_STORE + 1):
            category = random.choice(categories)
            product = Product(
                name=f"{category.name} item {store.id}-{n}",
                thumbnail=f"https://picsum.photos/seed/{store.id}{n}/300/300",
                description=f"Category: {category.name}. Sold by {store.name}.",
                price=round(random.uniform(5.00, 500.00), 2),
                stock=random.randint(0, 200),
                status=random.choice(["active", "active", "active", "inactive"]),
                store_id=store.id,
                category_id=category.id,
            )
            session.add(product)
            products.append(product)
    session.flush()

    for product in products:
        for k in range(random.randint(0, 3)):
            session.add(ProductImage(
                name=f"{product.name} #{k + 1}",
                path=f"images/products/{product.id}/{k + 1}.jpg",
                product_id=product.id,
            ))
    session.commit()
    return products


def seed_purchases(session, customers, products):
    """Carts for every customer; roughly half of them turned into orders, plus reviews."""
    orders = 0
    for user in customers:
        for product in random.sample(products, k=3):
            quantity = random.randint(1, 5)
            cart = Cart(
                quantity=quantity,
                total_price=round(product.price * quantity, 2),
                product_id=product.id,
                user_id=user.id,
            )
            session.add(cart)
            session.flush()

            if random.random() < 0.5:
                payment = Payment(payment_method=random.choice(["card", "blik", "transfer"]),
                                  status=random.choice(PAYMENT_STATUSES))
                session.add(payment)
                session.flush()
                session.add(Order(
                    final_price=cart.total_price,
                    cart_id=cart.id,
                    payment_id=payment.id,
                    order_date=ORDER_DATE_START + timedelta(days=random.randint(0, 365)),
                ))
                orders += 1

            # One review per (user, product)
            if random.random() < 0.4:
                session.add(Review(
                    user_id=user.id,
                    product_id=product.id,
                    rating=random.randint(1, 5),
                    review=random.choice([None, "Great value.", "Arrived late but works.", "Not what I expected."]),
                ))
    session.commit()
    return orders


def populate_database():
    """Main execution function to populate database."""
    init_db()
    session = SessionLocal()
    try:
        if session.query(Store).first() is not None:
            print("Catalog data already present, nothing to do.")
            return

        customers = seed_users(session)
        products = seed_catalog(session)
        orders = seed_purchases(session, customers, products)
        print(f"Inserted {len(products)} products, {orders} orders for {session.query(User).count()} users.")
    finally:
        session.close()


if __name__ == "__main__":
    populate_database()
