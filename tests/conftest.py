import pytest
from fastapi.testclient import TestClient

from vetting_api.core.chain import ChainClientError
from vetting_api.core.config import Settings
from vetting_api.core.keys import Ed25519Keypair
from vetting_api.main import create_app

TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)
PACKAGE_ID = "0x" + "5e" * 32
TABLE_ID = "0x" + "ab" * 32


class FakeChainClient:
    """In-memory stand-in for the Sui client that records every call."""

    def __init__(self):
        self.move_calls = []
        self.object_requests = []
        self.execute_result = {"digest": "9XyZdigest", "objectChanges": []}
        self.objects = {}
        self.error = None
        self.closed = False

    async def execute_move_call(self, target, arguments, signer, options):
        self.move_calls.append(
            {"target": target, "arguments": arguments, "signer": signer, "options": options}
        )
        if self.error:
            raise self.error
        return self.execute_result

    async def get_object(self, object_id, options):
        self.object_requests.append({"id": object_id, "options": options})
        if self.error:
            raise self.error
        if object_id in self.objects:
            return {"data": self.objects[object_id]}
        return {"error": {"code": "notExists", "object_id": object_id}}

    async def close(self):
        self.closed = True


def make_settings(**overrides):
    values = {
        "PACKAGE_ID": PACKAGE_ID,
        "MASTER_MNEMONIC": TEST_MNEMONIC,
        "SUI_RPC_URL": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(scope="session")
def signer():
    return Ed25519Keypair.derive_keypair(TEST_MNEMONIC)


@pytest.fixture
def chain():
    return FakeChainClient()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def client(settings, chain, signer):
    app = create_app(settings=settings, chain_client=chain, signer=signer)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def upstream_error():
    return ChainClientError("Insufficient gas", code=-32002, cause="GasBalanceTooLow")
