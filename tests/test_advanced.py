"""
Advanced tests for the Bank Account Management API.
Tests extreme values, money conservation and multi-account scenarios.
"""

from decimal import Decimal

from bank_management.models import AccountTransaction, AccountTransactionType, BankingAccount
from bank_management.services import ledger


def _balance(client, number):
    return float(client.get(f"/api/v1/accounts/{number}").json()["balance"])


def _transfer(client, source, destination, amount):
    return client.post(
        f"/api/v1/accounts/{source}/transactions/transfer",
        json={"amount": amount, "destination_account_number": destination},
    )


# ==================== EXTREME VALUE TESTS ====================

def test_very_large_recharge(client, api_account):
    """Recharges are not bound by the withdrawal limit."""
    number = api_account("111")
    response = client.post(
        f"/api/v1/accounts/{number}/transactions/recharge", json={"amount": 999999999.99}
    )
    assert response.status_code == 201
    assert _balance(client, number) == 999999999.99


def test_very_small_transfer(client, api_account):
    """Test transfer of minimum amount (1 penny)."""
    source = api_account("111", 1.00)
    destination = api_account("222")

    response = _transfer(client, source, destination, 0.01)
    assert response.status_code == 201
    assert _balance(client, source) == 0.99
    assert _balance(client, destination) == 0.01


def test_many_small_transfers(client, api_account):
    """Test many small transfers accumulate correctly."""
    source = api_account("111", 1.00)
    destination = api_account("222")

    for _ in range(100):
        assert _transfer(client, source, destination, 0.01).status_code == 201

    assert _balance(client, source) == 0.00
    assert _balance(client, destination) == 1.00

    response = _transfer(client, source, destination, 0.01)
    assert response.status_code == 409


def test_decimal_precision(client, api_account):
    """Test that decimal amounts do not pick up float drift."""
    number = api_account("111")
    for amount in (0.10, 0.20, 0.30):
        client.post(f"/api/v1/accounts/{number}/transactions/recharge", json={"amount": amount})
    assert _balance(client, number) == 0.60

    client.post(f"/api/v1/accounts/{number}/transactions/withdrawal", json={"amount": 0.15})
    assert _balance(client, number) == 0.45


def test_transfer_at_withdrawal_limit(client, api_account):
    """A transfer equal to the limit passes, one penny more does not."""
    source = api_account("111", 20000.00)
    destination = api_account("222")

    assert _transfer(client, source, destination, 5000.00).status_code == 201
    response = _transfer(client, source, destination, 5000.01)
    assert response.status_code == 409
    assert "withdrawal limit" in response.json()["detail"]
    assert _balance(client, source) == 15000.00


# ==================== BUSINESS LOGIC EDGE CASES ====================

def test_transfer_exact_balance(client, api_account):
    """Test transferring the exact balance leaves zero."""
    source = api_account("111", 250.00)
    destination = api_account("222")

    assert _transfer(client, source, destination, 250.00).status_code == 201
    assert _balance(client, source) == 0.00
    assert _balance(client, destination) == 250.00


def test_transfer_one_penny_over_balance(client, api_account):
    """Test transferring one penny more than the balance fails without side effects."""
    source = api_account("111", 250.00)
    destination = api_account("222")

    response = _transfer(client, source, destination, 250.01)
    assert response.status_code == 409
    assert "Insufficient funds" in response.json()["detail"]

    assert _balance(client, source) == 250.00
    assert _balance(client, destination) == 0.00
    history = client.get(f"/api/v1/accounts/{source}/transactions/filter/type/TRANSFER")
    assert history.json() == []


def test_zero_balance_account_operations(client, api_account):
    """Test operations on an account with nothing in it."""
    empty = api_account("111")
    other = api_account("222", 10.00)

    assert client.post(
        f"/api/v1/accounts/{empty}/transactions/withdrawal", json={"amount": 0.01}
    ).status_code == 409
    assert _transfer(client, empty, other, 0.01).status_code == 409
    assert _transfer(client, other, empty, 10.00).status_code == 201
    assert _balance(client, empty) == 10.00


def test_transfer_to_blocked_account_is_atomic(client, api_account):
    """A rejected transfer leaves both accounts untouched."""
    source = api_account("111", 100.00)
    destination = api_account("222", 50.00)
    client.put(f"/api/v1/accounts/{destination}/status/BLOCKED")

    response = _transfer(client, source, destination, 30.00)
    assert response.status_code == 409
    assert _balance(client, source) == 100.00

    client.put(f"/api/v1/accounts/{destination}/status/ACTIVE")
    assert _balance(client, destination) == 50.00


def test_complex_multi_account_scenario(client, api_account):
    """Test a ring of transfers between several accounts."""
    a = api_account("111", 1000.00)
    b = api_account("222", 500.00)
    c = api_account("333", 250.00)

    assert _transfer(client, a, b, 200.00).status_code == 201
    assert _transfer(client, b, c, 300.00).status_code == 201
    assert _transfer(client, c, a, 100.00).status_code == 201

    assert _balance(client, a) == 900.00
    assert _balance(client, b) == 400.00
    assert _balance(client, c) == 450.00
    assert _balance(client, a) + _balance(client, b) + _balance(client, c) == 1750.00


# ==================== LEDGER CONSISTENCY ====================

def test_balances_match_entries(db, open_account):
    """Every balance equals the sum of its signed ledger entries."""
    accounts = [open_account(str(dni), "1000") for dni in range(4)]

    for step in range(40):
        source = accounts[step % 4]
        destination = accounts[(step * 3 + 1) % 4]
        if source != destination:
            ledger.transfer(db, source, destination, Decimal("12.34"))
        ledger.withdraw(db, accounts[step % 4], Decimal("1.01"))
        ledger.recharge(db, accounts[(step + 2) % 4], Decimal("0.99"))

    total = Decimal("0")
    for number in accounts:
        account = db.query(BankingAccount).filter_by(account_number=number).one()
        entries = db.query(AccountTransaction).filter_by(banking_account_id=account.id).all()
        assert account.balance == sum((entry.signed_amount for entry in entries), Decimal("0"))
        total += account.balance

    # Transfers move money around; only recharges and withdrawals change the total.
    assert total == Decimal("4000") + 40 * (Decimal("0.99") - Decimal("1.01"))


def test_transfer_legs_pair_up(db, open_account):
    """Each transfer leaves one debit and one credit naming each other."""
    a = open_account("111", "500")
    b = open_account("222")
    for _ in range(5):
        ledger.transfer(db, a, b, Decimal("20"))

    debits = ledger.filter_by_type(db, a, AccountTransactionType.TRANSFER)
    credits = ledger.filter_by_type(db, b, AccountTransactionType.TRANSFER)
    assert len(debits) == len(credits) == 5
    assert {d.entry_type.name for d in debits} == {"DEBIT"}
    assert {c.entry_type.name for c in credits} == {"CREDIT"}
    assert all(d.counterparty_account_number == b for d in debits)
    assert all(c.counterparty_account_number == a for c in credits)
