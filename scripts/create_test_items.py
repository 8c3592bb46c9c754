#!/usr/bin/env python3
"""Create random inventory items through the Stockroom WebSocket API.

This is a dev/test utility script - security linting rules are relaxed:
- S311: Uses standard random (not crypto) - fine for test data generation
- PLR2004: Magic numbers are acceptable in test scripts

Environment:
    HA_BASE_URL   Home Assistant base URL (default http://localhost:8123)
    HA_TOKEN      long-lived access token (required)
    ITEM_COUNT    number of items to create (default 30)
    START_INDEX   offset used for names and skus (default 0)
"""
# ruff: noqa: S311, PLR2004

import asyncio
import os
import random
import sys

import aiohttp

ITEM_NAMES = [
    "Wireless Keyboard",
    "USB-C Cable",
    "HDMI Adapter",
    "Laptop Stand",
    "Desk Lamp",
    "Webcam",
    "Noise Cancelling Headphones",
    "Portable SSD",
    "Monitor Arm",
    "Filing Cabinet",
    "Whiteboard",
    "Office Chair Mat",
    "Surge Protector",
    "Ethernet Switch",
    "Label Printer",
]

CATEGORIES = ["Electronics", "Accessories", "Furniture", "Networking", "Office Supplies"]


def generate_random_item(index):
    """Generate a random creation payload."""
    name = f"{random.choice(ITEM_NAMES)} #{index + 1}"
    category = random.choice(CATEGORIES)
    return {
        "name": name,
        "quantity": random.randint(0, 200),
        "price": round(random.uniform(2.0, 1500.0), 2),
        "category": category,
        "sku": f"{category[:3].upper()}-{index + 1:04d}",
    }


async def _authenticate(ws, token):
    msg = await asyncio.wait_for(ws.receive_json(), timeout=5)
    if msg.get("type") != "auth_required":
        print(f"  Unexpected message: {msg}")
        return False
    await ws.send_json({"type": "auth", "access_token": token})
    msg = await asyncio.wait_for(ws.receive_json(), timeout=5)
    if msg.get("type") != "auth_ok":
        print(f"  Auth failed: {msg}")
        return False
    return True


async def create_item_via_ws(ws, item_data, msg_id):
    """Send one stockroom/item/create command and return the created item."""
    await ws.send_json({"id": msg_id, "type": "stockroom/item/create", **item_data})
    msg = await asyncio.wait_for(ws.receive_json(), timeout=10)
    if msg.get("success"):
        return msg["result"]["item"]
    print(f"  Error: {msg.get('error', {}).get('message', 'Unknown error')}")
    return None


async def main():
    """Run the test item creation script."""
    base_url = os.environ.get("HA_BASE_URL", "http://localhost:8123")
    token = os.environ.get("HA_TOKEN")

    if not token:
        print("Error: HA_TOKEN environment variable not set")
        sys.exit(1)

    start_index = int(os.environ.get("START_INDEX", "0"))
    count = int(os.environ.get("ITEM_COUNT", "30"))
    ws_url = base_url.replace("http://", "ws://").replace("https://", "wss://") + "/api/websocket"

    print(f"Connecting to Home Assistant at {base_url}")
    print("-" * 60)

    created = 0
    failed = 0

    async with aiohttp.ClientSession() as session, session.ws_connect(ws_url) as ws:
        if not await _authenticate(ws, token):
            sys.exit(1)

        for i in range(start_index, start_index + count):
            item_data = generate_random_item(i)
            print(f"[{i + 1:3}/{start_index + count}] Creating: {item_data['name']}")
            print(
                f"          {item_data['category']} / {item_data['sku']}, "
                f"Qty: {item_data['quantity']}, Price: {item_data['price']:.2f}"
            )

            try:
                result = await create_item_via_ws(ws, item_data, i + 100)
            except TimeoutError:
                print("  Timeout waiting for response")
                result = None

            if result:
                print(f"          Created with ID: {result['id']}")
                created += 1
            else:
                print("          Failed to create")
                failed += 1

            # Every create rewrites the whole collection; keep the pace gentle
            await asyncio.sleep(random.uniform(0.2, 0.6))

    print("-" * 60)
    print(f"Done! Created: {created}, Failed: {failed}")


if __name__ == "__main__":
    asyncio.run(main())
