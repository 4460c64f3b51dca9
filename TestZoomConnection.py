"""
Check that the Zoom credentials in the environment work.

Usage:
    python TestZoomConnection.py
"""
import os
import sys

import requests
from dotenv import load_dotenv

from commons import (
    ConfigError,
    get_access_token,
    get_current_user,
    load_config,
    print_config_error,
    print_request_error,
)


def print_user(user):
    print("Account information:")
    print(f"   - Email : {user.get('email')}")
    print(f"   - Name : {user.get('first_name')} {user.get('last_name')}")
    print(f"   - Account type : {user.get('type')}")
    print(f"   - Status : {user.get('status')}")


def check_connection(config):
    """
    Exchange a token and fetch the current user

    Returns:
        bool: True when both calls succeed
    """
    try:
        access_token = get_access_token(config)
    except requests.RequestException as e:
        print_request_error(e, title="Authentication failed")
        print("Check the credentials in your .env file", file=sys.stderr)
        return False
    print("Access token obtained\n")

    print("Testing the Zoom API connection...")
    try:
        user = get_current_user(access_token)
    except requests.RequestException as e:
        print_request_error(e, title="Connection test failed")
        return False

    print("Connection successful!\n")
    print_user(user)
    return True


def main():
    print("Zoom API connection test")
    print("=" * 50)

    print("\nChecking environment variables...")
    load_dotenv()
    try:
        config = load_config(os.environ)
    except ConfigError as e:
        print_config_error(e)
        return 1

    print("All environment variables are present")
    print(f"   - Account ID : {config.account_id[:8]}...")
    print(f"   - Client ID : {config.client_id[:8]}...")

    success = check_connection(config)

    print("\n" + "=" * 50)
    if success:
        print("Connection test completed successfully!")
        return 0
    print("Connection test failed")
    return 1


if __name__ == "__main__":
    sys.exit(main())
