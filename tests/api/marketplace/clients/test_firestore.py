from unittest.mock import patch


@patch("google.cloud.firestore.AsyncClient")
def test_create_firestore_client(mocked_async_client):
    """
    Test that create_firestore_client builds an AsyncClient from the google.cloud.firestore library.
    """
    from marketplace.clients.firestore import create_firestore_client

    client = create_firestore_client(project="demo-project")

    assert client is mocked_async_client.return_value
    assert mocked_async_client.call_args.kwargs["project"] == "demo-project"


@patch("google.cloud.firestore.AsyncClient")
def test_create_firestore_client_returns_new_instances(mocked_async_client):
    from marketplace.clients.firestore import create_firestore_client

    create_firestore_client()
    create_firestore_client()

    assert mocked_async_client.call_count == 2
