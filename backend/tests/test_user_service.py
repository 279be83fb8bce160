"""
Tests for accounts: registration, login, profile changes and account deletion.
"""

import pytest

from guideforge.auth.passwords import hash_password, verify_password
from guideforge.auth.tokens import create_access_token, decode_access_token
from guideforge.services.users.exceptions import (
    EmailAlreadyRegistered,
    IncorrectPassword,
    InvalidCredentials,
    UserNotFound,
)


class TestPasswordsAndTokens:
    def test_password_hash_round_trip(self):
        hashed = hash_password("correct horse")

        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")

    def test_token_carries_user_id(self):
        assert decode_access_token(create_access_token(42)) == 42

    def test_tampered_token_is_rejected(self):
        token = create_access_token(42)

        with pytest.raises(InvalidCredentials):
            decode_access_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))


class TestAuthService:
    async def test_register_and_login(self, auth_service):
        user = await auth_service.register(username="ada", email="Ada@Example.com", password="correct horse")

        assert user.email == "ada@example.com"
        assert user.password_hash != "correct horse"

        logged_in = await auth_service.login(email="ada@example.com", password="correct horse")
        assert logged_in.id == user.id

    async def test_duplicate_email_is_rejected(self, auth_service):
        await auth_service.register(username="ada", email="ada@example.com", password="correct horse")

        with pytest.raises(EmailAlreadyRegistered):
            await auth_service.register(username="other", email="ada@example.com", password="battery staple")

    async def test_wrong_password_and_unknown_email_look_the_same(self, auth_service):
        await auth_service.register(username="ada", email="ada@example.com", password="correct horse")

        with pytest.raises(InvalidCredentials) as wrong_password:
            await auth_service.login(email="ada@example.com", password="wrong horse")
        with pytest.raises(InvalidCredentials) as unknown_email:
            await auth_service.login(email="nobody@example.com", password="correct horse")

        assert str(wrong_password.value) == str(unknown_email.value)

    async def test_change_password(self, auth_service):
        user = await auth_service.register(username="ada", email="ada@example.com", password="correct horse")
        user_id = user.id

        with pytest.raises(IncorrectPassword):
            await auth_service.change_password(user_id, current_password="nope", new_password="battery staple")

        await auth_service.change_password(user_id, current_password="correct horse", new_password="battery staple")

        with pytest.raises(InvalidCredentials):
            await auth_service.login(email="ada@example.com", password="correct horse")
        assert (await auth_service.login(email="ada@example.com", password="battery staple")).id == user_id


class TestUserService:
    async def test_update_profile(self, user_service, owner):
        user = await user_service.update_profile(owner.id, username="renamed", email="New@Example.com")

        assert user.username == "renamed"
        assert user.email == "new@example.com"

    async def test_update_profile_rejects_taken_email(self, user_service, owner, other_user):
        owner_id, taken = owner.id, other_user.email

        with pytest.raises(EmailAlreadyRegistered):
            await user_service.update_profile(owner_id, username="owner", email=taken)

    async def test_profile_image_replaces_previous_blob(self, user_service, storage, owner, png_bytes):
        user = await user_service.update_profile_image(
            owner.id, filename="me.jpg", data=png_bytes, size=len(png_bytes), mime_type="image/jpeg"
        )
        first_path = user.profile_image
        assert first_path == f"profiles/user_{owner.id}.jpg"
        assert await storage.exists(first_path)

        user = await user_service.update_profile_image(
            owner.id, filename="me.png", data=png_bytes, size=len(png_bytes), mime_type="image/png"
        )

        assert user.profile_image == f"profiles/user_{owner.id}.png"
        assert await storage.exists(user.profile_image)
        assert not await storage.exists(first_path)

    async def test_delete_user_cascades(self, user_service, manual_service, storage, owner, other_user, png_bytes):
        owner_id, other_id = owner.id, other_user.id
        mine = await manual_service.create_manual(owner_id, title="Mine")
        theirs = await manual_service.create_manual(other_id, title="Theirs")
        mine_id, theirs_id = mine.id, theirs.id
        step = await manual_service.create_step(mine_id, owner_id, title="Only step")
        image = await manual_service.upload_image(
            step.id, owner_id, filename="a.png", data=png_bytes, size=len(png_bytes), mime_type="image/png"
        )
        image_path = image.file_path
        user = await user_service.update_profile_image(
            owner_id, filename="me.png", data=png_bytes, size=len(png_bytes), mime_type="image/png"
        )
        profile_path = user.profile_image

        await user_service.delete_user(owner_id)

        with pytest.raises(UserNotFound):
            await user_service.get_user(owner_id)
        assert await manual_service.manuals.get(mine_id) is None
        assert await manual_service.manuals.get(theirs_id) is not None
        assert not await storage.exists(image_path)
        assert not await storage.exists(profile_path)
