#!/usr/bin/env python3
"""
Counter Registry - Example

Walks through creating, updating and replaying counters with a fixed host
environment, then shows ownership and lookup failures.
"""

import logging

from reseed import NotFound, NotOwner, StaticEnvironment, create_registry


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    print("Counter Registry - Example")
    print("=" * 50)

    # 1. Fixed inputs reproduce the same ids and values on every run
    env = StaticEnvironment(bytes([0, 1, 2]), round_counter=0, caller="alice.testnet")
    registry = create_registry(env)

    counter_id = registry.create_counter()
    print(f"1. Created {counter_id} = {registry.get_counter(counter_id)}")

    registry.increment("alice.testnet", counter_id)
    print(f"   After increment: {registry.get_counter(counter_id)}")

    env.advance()
    registry.decrement("alice.testnet", counter_id)
    print(f"   After decrement: {registry.get_counter(counter_id)}")

    # 2. Only the owner may change a counter
    try:
        registry.increment("bob.testnet", counter_id)
    except NotOwner as e:
        print(f"2. Rejected: {e.code}")

    # 3. Unknown ids fail
    try:
        registry.get_counter("nonexistent")
    except NotFound as e:
        print(f"3. Rejected: {e.code}")

    # 4. Replay with the same inputs
    replay = create_registry(StaticEnvironment(bytes([0, 1, 2]), round_counter=0))
    print(f"4. Replayed id matches: {replay.create_counter('alice.testnet') == counter_id}")


if __name__ == "__main__":
    main()
