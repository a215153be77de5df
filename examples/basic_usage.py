"""
GoTrue API Python Client - Basic Usage Example

This example demonstrates the basic usage of the GoTrue API client.
"""

import asyncio
import logging
import os

from gotrue_api import (
    AdminUserAttributes,
    GoTrueApi,
    GoTrueApiConfig,
    NetworkError,
    OpenIDConnectCredentials,
)


async def main():
    service_key = os.environ.get("GOTRUE_SERVICE_KEY", "service-role-key")

    async with GoTrueApi(GoTrueApiConfig(
        url="http://localhost:9999",
        headers={"apikey": service_key, "Authorization": f"Bearer {service_key}"},
        debug=True,
    )) as api:
        print("=== Provider URL ===\n")
        print(api.get_url_for_provider(
            "github",
            redirect_to="http://localhost:3000/callback",
            scopes="read:user user:email",
        ))

        print("\n=== Admin ===\n")
        try:
            created = await api.create_user(AdminUserAttributes(
                email="user@example.com",
                password="SecurePassword123!",
                email_confirm=True,
            ))
            if created.error:
                print(f"Create failed ({created.error.status}): {created.error.message}")
            else:
                print(f"Created user: {created.user.id}")

            listed = await api.list_users()
            if listed.users is not None:
                print(f"{len(listed.users)} users")
        except NetworkError as e:
            print(f"Service unreachable: {e.message}")
            return

        print("\n=== OpenID Connect ===\n")
        result = await api.sign_in_with_openid_connect(OpenIDConnectCredentials(
            id_token="eyJhbGciOi...",
            nonce="random-nonce",
            provider="google",
        ))
        if result.session:
            print(f"Session expires at {result.session.expires_at}")
            await api.sign_out(result.session.access_token)
        else:
            print(f"Sign-in rejected: {result.error.message}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(main())
