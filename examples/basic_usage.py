"""Basic usage example for the address.so wallet API client.

This example demonstrates:
- Loading credentials from a .env file
- Listing supported coins
- Listing wallets and their accounts for one coin
"""

import logging

from dotenv import load_dotenv

from address_api import AddressClient, ClientConfig, RequestFailedError

load_dotenv()

logging.basicConfig(level=logging.INFO)


def main():
    config = ClientConfig.from_env(dotenv=False)

    with AddressClient(config) as client:
        try:
            coins = client.get_coins()
            print(f"Supported coins: {coins}")

            wallets = client.get_wallets()
            print(f"{config.coin} wallets: {wallets}")

            entries = wallets.get("data", []) if isinstance(wallets, dict) else []
            for wallet in entries:
                accounts = client.get_accounts(int(wallet["id"]))
                print(f"   Wallet {wallet['id']} accounts: {accounts}")
        except RequestFailedError as exc:
            print(f"❌ Request failed ({exc.status_code}): {exc.message}")


if __name__ == "__main__":
    main()
