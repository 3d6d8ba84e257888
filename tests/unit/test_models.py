import uuid

from chaingate.db.models import Chain, ContractAbi, TransactionRecord, User
from chaingate.domain.enums import TxStatus


class TestChainModel:
    async def test_timestamps_set_by_database(self, session):
        chain = Chain(
            id="5", name="Goerli", currency="ETH", rpc_url="https://rpc", explorer_url="https://x", is_testnet=True,
        )
        session.add(chain)
        await session.flush()
        await session.refresh(chain)
        assert chain.created_at is not None
        assert chain.is_active is True


class TestTransactionRecordModel:
    async def test_defaults(self, seeded):
        record = TransactionRecord(chain_id="1", user_id="system", to_addr="0xabc")
        seeded.add(record)
        await seeded.flush()
        await seeded.refresh(record)

        assert isinstance(record.id, uuid.UUID)
        assert record.status == TxStatus.PENDING.value
        assert record.data == "0x"
        assert record.value == "0"
        assert record.from_addr is None
        assert record.tx_hash is None


class TestContractAbiModel:
    async def test_abi_json_round_trips(self, seeded):
        abi = [{"type": "function", "name": "totalSupply", "inputs": [], "outputs": [{"type": "uint256"}]}]
        seeded.add(ContractAbi(chain_id="1", address="0xabc", abi=abi))
        await seeded.flush()
        stored = await seeded.get(ContractAbi, 1)
        assert stored.abi == abi
        assert stored.source == "etherscan"


class TestUserModel:
    async def test_active_by_default(self, session):
        user = User(name="alice", api_key_hash="0" * 64)
        session.add(user)
        await session.flush()
        assert user.is_active is True
