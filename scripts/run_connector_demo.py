#!/usr/bin/env python3
"""
Run the VWO connector end to end against a real account.

initialize -> list experiments -> client config -> client side init ->
variants, activation and a tracked conversion for one user.

Credentials come from VWO_ACCOUNT_ID and VWO_SDK_KEY (VWO_POLL_TIME optional).
"""

import asyncio
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "src"))


async def run(user_id: str) -> int:
    from experimentation import ConfigurationError, ProviderConfig
    from experimentation.vwo import VwoListener, VwoProvider

    try:
        config = ProviderConfig.from_env()
    except ConfigurationError as e:
        print(f"ERROR: {e}. Set VWO_ACCOUNT_ID and VWO_SDK_KEY.")
        return 1

    provider = VwoProvider()
    print("1. Initializing provider...")
    if not await provider.initialize(config):
        print("ERROR: provider initialization failed, experimentation disabled")
        return 1

    try:
        print("2. Listing experiments...")
        for experiment in await provider.get_experiments():
            print(
                f"   - {experiment.id} [{experiment.status.value}] "
                f"{len(experiment.variations)} variations"
            )

        print("3. Initializing client side...")
        client_config = await provider.get_config_for_client_side_init()
        listener = VwoListener()
        if not provider.initialize_client_side(client_config):
            print("ERROR: client side initialization failed")
            return 1
        listener.initialize_client_side(client_config, user_id)

        print(f"4. Assigning and activating for {user_id}...")
        variants = provider.get_variants_for_user(user_id)
        for variant in variants:
            print(f"   - {variant.experiment_id} -> variation {variant.variant_id}")
        provider.activate_experiment(user_id, variants)

        print("5. Tracking a conversion...")
        listener.track_event("purchase", {"revenue": 10})
    finally:
        await provider.shutdown()

    print("\n[OK] Connector demo complete.")
    return 0


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    user_id = sys.argv[1] if len(sys.argv) > 1 else "demo-user-001"
    sys.exit(asyncio.run(run(user_id)))


if __name__ == "__main__":
    main()
