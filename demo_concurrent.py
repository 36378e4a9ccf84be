import asyncio
import sys

from sdk.forms import ProductForm
from sdk.pyinventory import AsyncInventoryClient, InventoryClient
from sdk.sync import SyncController


async def main(base_url: str = "http://127.0.0.1:3000"):
    seed = InventoryClient(base_url=base_url)
    seed.reset()
    for name, price in [("Desk Lamp", "25"), ("Desk Chair", "120"), ("Lamp Shade", "12")]:
        seed.create_product(ProductForm(name=name, price=price, stock="5", category="Household"))

    ctl = SyncController(AsyncInventoryClient(base_url=base_url), notify=print)
    await ctl.activate()
    print(f"\n📦 Loaded {len(ctl.state.products)} products")

    # Two searches in flight at once; nothing cancels the first, so the
    # state shows whichever response resolved last.
    print("\n⚡ Firing overlapping searches for 'desk' and 'lamp'...")
    await asyncio.gather(ctl.search("desk"), ctl.search("lamp"))
    print(f"🔍 search text: {ctl.state.search_text!r}")
    print("📋 visible:", [p.name for p in ctl.visible_products()])

    # Optimistic delete of the first visible product
    target = ctl.visible_products()[0]
    before = len(ctl.state.products)
    await ctl.delete_product(target.id, lambda: True)
    print(f"\n🗑️  {target.name}: {before} -> {len(ctl.state.products)} products")


if __name__ == "__main__":
    asyncio.run(main(*sys.argv[1:]))
