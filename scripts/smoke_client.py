#!/usr/bin/env python3
"""Drive a running chip tracker server through one full pot.

Usage:
    python -m server.main          # in another shell
    python scripts/smoke_client.py --base http://localhost:5001
"""

import argparse
import asyncio
import json
import httpx
import websockets


async def recv_room(ws) -> dict:
    """Wait for the next roomUpdate and return its room."""
    while True:
        message = await asyncio.wait_for(ws.recv(), timeout=10.0)
        data = json.loads(message)
        if data.get("type") == "roomUpdate":
            return data["room"]
        print(f"  (ignored {data.get('type')})")


def show(room: dict) -> None:
    players = ", ".join(
        f"{p['name']}{'*' if p['isHost'] else ''}={p['chips']}" for p in room["players"]
    )
    print(f"  room {room['code']} pot={room['pot']} players: {players}")


async def run(base: str) -> None:
    ws_base = base.replace("http", "ws", 1)

    async with httpx.AsyncClient(base_url=base) as client:
        health = await client.get("/api/health")
        print(f"Health: {health.json()}")

        created = (await client.post("/api/room/create", json={"playerName": "Alice"})).json()
        code = created["roomCode"]
        alice_id = created["playerId"]
        print(f"Alice created room {code}")

        joined = (
            await client.post("/api/room/join", json={"roomCode": code, "playerName": "Bob"})
        ).json()
        bob_id = joined["playerId"]
        print(f"Bob joined as {bob_id}")

        missing = await client.post("/api/room/join", json={"roomCode": "ZZZZ", "playerName": "Eve"})
        print(f"Join unknown room: {missing.status_code} {missing.json()}")

    async with websockets.connect(f"{ws_base}/ws") as alice, websockets.connect(f"{ws_base}/ws") as bob:
        await alice.send(json.dumps({"type": "joinRoom", "roomCode": code, "playerId": alice_id}))
        show(await recv_room(alice))
        await bob.send(json.dumps({"type": "joinRoom", "roomCode": code, "playerId": bob_id}))
        show(await recv_room(bob))
        await recv_room(alice)

        print("Alice starts the game")
        await alice.send(json.dumps({"type": "startGame", "roomCode": code}))
        show(await recv_room(bob))
        await recv_room(alice)

        for ws, player_id, name in ((alice, alice_id, "Alice"), (bob, bob_id, "Bob")):
            print(f"{name} bets 20")
            await ws.send(
                json.dumps({"type": "placeBet", "roomCode": code, "playerId": player_id, "amount": 20})
            )
            show(await recv_room(alice))
            await recv_room(bob)

        print("Alice awards the pot to Bob")
        await alice.send(json.dumps({"type": "decideWinner", "roomCode": code, "winnerId": bob_id}))
        room = await recv_room(bob)
        show(room)
        await recv_room(alice)

        chips = {p["id"]: p["chips"] for p in room["players"]}
        assert room["pot"] == 0, room
        assert chips == {alice_id: 80, bob_id: 120}, chips

        print("Alice disconnects; Bob should become host")
        await alice.close()
        show(await recv_room(bob))

    print("Smoke run complete")


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--base", default="http://localhost:5001", help="Server base URL")
    args = parser.parse_args()
    asyncio.run(run(args.base))


if __name__ == "__main__":
    main()
