"""Walk one order through its lifecycle against the configured store."""

import asyncio

from statekeeper import InstanceManager, get_store
from statekeeper.workflows import OrderService


async def main():
    store = get_store()
    await store.connect()

    service = OrderService(InstanceManager(store))

    # Each call is independent: state is restored from the store every time
    result = await service.create(owner_id=1, product_code="exampleProductCode")
    print(f"📦 {result.key}: {result.state_id}")

    result = await service.reject(owner_id=1)
    print(f"🚫 {result.key}: {result.state_id}")

    result = await service.approve(owner_id=1, approval_code="too-late")
    print(f"⏭️  APPROVE ignored: {result.ignored} (still {result.state_id})")

    result = await service.cancel(owner_id=1, reason_cancelled="Whatever")
    print(f"✅ {result.key}: {result.state_id}, done={result.done}")

    await store.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
