"""Signed request example for the address.so wallet API client.

This example demonstrates:
- Sending from an account with an HMAC-signed request
- Granting and revoking wallet permissions

Requires ADDRESS_API_TOKEN, ADDRESS_SECRET_TOKEN and ADDRESS_COIN, plus
WALLET_ID, ACCOUNT_ID, RECIPIENT and SHARE_WITH_USER_ID.
"""

import os

from dotenv import load_dotenv

from address_api import AddressAPIError, AddressClient, Permission

load_dotenv()


def example_send_and_share():
    recipient = os.getenv("RECIPIENT")
    if not recipient:
        raise ValueError("RECIPIENT not found in environment variables")

    wallet_id = int(os.getenv("WALLET_ID", "0"))
    account_id = int(os.getenv("ACCOUNT_ID", "0"))
    user_id = int(os.getenv("SHARE_WITH_USER_ID", "0"))

    client = AddressClient.from_env()

    try:
        result = client.send_from_account(wallet_id, account_id, "0.001", recipient)
        print(f"✅ Transfer submitted: {result}")

        client.set_permissions(wallet_id, user_id, [Permission.VIEW, Permission.ORDER])
        print(f"✅ Shared wallet {wallet_id} with user {user_id}")

        client.remove_all_permissions(wallet_id, user_id)
        print(f"✅ Revoked all permissions for user {user_id}")
    except AddressAPIError as exc:
        print(f"❌ {type(exc).__name__}: {exc.message}")
    finally:
        client.close()


if __name__ == "__main__":
    example_send_and_share()
