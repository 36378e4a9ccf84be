#!/usr/bin/env python
import sys

from sdk.forms import ProductForm
from sdk.pyinventory import InventoryClient, as_dict


def main(base_url: str = "http://127.0.0.1:3000"):
    c = InventoryClient(base_url=base_url)

    # -----------------------------
    # Reset everything for demo (dev server only)
    # -----------------------------
    print("Resetting store...")
    c.reset()

    # -----------------------------
    # Create products
    # -----------------------------
    print("\nCreating products...")
    laptop = c.create_product(ProductForm(
        name="Laptop", price="1500", stock="3", category="Electronics", brand="Acme",
    ))
    cable = c.create_product(ProductForm(
        name="USB Cable", price="9.5", stock="40", category="Accessories",
    ))
    print(as_dict(laptop))
    print(as_dict(cable))

    # -----------------------------
    # List / search
    # -----------------------------
    print("\nListing products...")
    for p in c.list_products():
        print(as_dict(p))

    print("\nSearching for 'lap'...")
    print([p.name for p in c.search_products("lap")])

    # -----------------------------
    # Update
    # -----------------------------
    print("\nUpdating laptop stock...")
    form = ProductForm.from_product(c.get_product(laptop.id))
    form.update_field("stock", "2 units")
    print(as_dict(c.update_product(laptop.id, form)))

    # -----------------------------
    # Delete
    # -----------------------------
    print("\nDeleting cable...")
    c.delete_product(cable.id)
    print([p.name for p in c.list_products()])


if __name__ == "__main__":
    main(*sys.argv[1:])
