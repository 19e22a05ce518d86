"""Utility script to generate the VAPID key pair used for Web Push."""

from __future__ import annotations

import argparse

from app.infrastructure.notifications.push import generate_vapid_keys


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for key generation."""

    parser = argparse.ArgumentParser(
        description="Generate a VAPID key pair for browser push notifications.",
    )
    parser.add_argument(
        "--env",
        action="store_true",
        help="Print the keys as environment variable assignments ready for a .env file.",
    )
    return parser.parse_args()


def main() -> None:
    """Print a freshly generated key pair."""

    args = parse_args()
    keys = generate_vapid_keys()
    if args.env:
        print(f"VAPID_PUBLIC_KEY={keys['public_key']}")
        print(f"VAPID_PRIVATE_KEY={keys['private_key']}")
        return
    print(
        "VAPID keys generated:\n"
        f"  Public key: {keys['public_key']}\n"
        f"  Private key: {keys['private_key']}"
    )


if __name__ == "__main__":
    main()
