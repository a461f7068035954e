from marketplace.models.user import User


def test_from_identity_toolkit():
    user = User.from_identity_toolkit(
        {"localId": "uid-1", "email": "a@example.com", "displayName": "", "idToken": "token"}
    )

    assert user.uid == "uid-1"
    assert user.email == "a@example.com"
    assert user.display_name is None


def test_from_decoded_token():
    user = User.from_decoded_token({"uid": "uid-2", "email": "b@example.com", "name": "Bea"})

    assert user == User(uid="uid-2", email="b@example.com", display_name="Bea")
