"""End-to-end tests for the click CLI against a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from shophub.infrastructure.cli.main import cli

CATALOGUE = [
    {"id": "0001", "description": "40 inch TV", "image": "0001.jpg", "price": "269.00", "stock": 10},
    {"id": "0002", "description": "DAB Radio", "image": "0002.jpg", "price": "29.99", "stock": 3},
    {"id": "0008", "description": "USB cable", "image": "0008.jpg", "price": "4.99", "stock": 80},
]


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "products.json").write_text(json.dumps(CATALOGUE), encoding="utf-8")
    return tmp_path


@pytest.fixture
def run(data_dir):
    runner = CliRunner()
    env = {"SHOPHUB_DATA_DIR": str(data_dir), "SHOPHUB_GRACE_PERIOD": "0"}

    def invoke(*args, input=None):
        return runner.invoke(cli, list(args), env=env, input=input)

    return invoke


def _stock(data_dir, product_id):
    raw = json.loads((data_dir / "products.json").read_text(encoding="utf-8"))
    return next(item["stock"] for item in raw if item["id"] == product_id)


def _checkout(run, items="0001:1", *extra):
    return run("customer", "checkout", "--items", items, "--payment", "cash", "--yes", *extra)


class TestCustomerCommands:

    def test_search_by_description(self, run):
        result = run("customer", "search", "radio")
        assert result.exit_code == 0
        assert "DAB Radio" in result.output
        assert "£29.99" in result.output

    def test_search_no_match(self, run):
        result = run("customer", "search", "kettle")
        assert result.exit_code == 0
        assert "No product was found for 'kettle'" in result.output

    def test_checkout_places_order(self, run, data_dir):
        result = _checkout(run, "0001:1,0002:2")
        assert result.exit_code == 0, result.output
        assert "Order_ID: 1" in result.output
        assert "Payment: Cash" in result.output
        assert (data_dir / "orders" / "ordered" / "1.txt").is_file()
        assert _stock(data_dir, "0001") == 9
        assert _stock(data_dir, "0002") == 1

    def test_checkout_ids_continue_across_runs(self, run, data_dir):
        _checkout(run)
        _checkout(run)
        assert sorted(p.name for p in (data_dir / "orders" / "ordered").iterdir()) == [
            "1.txt",
            "2.txt",
        ]

    def test_checkout_below_minimum(self, run, data_dir):
        result = _checkout(run, "0008:1")
        assert result.exit_code == 1
        assert "Minimum payment is £5.00" in result.output
        assert _stock(data_dir, "0008") == 80

    def test_vip_skips_minimum(self, run):
        result = _checkout(run, "0008:1", "--tier", "vip")
        assert result.exit_code == 0, result.output
        assert "Customer: VIP" in result.output

    def test_checkout_shortage(self, run, data_dir):
        result = _checkout(run, "0002:5")
        assert result.exit_code == 1
        assert "Only 3 available, 5 requested" in result.output
        assert not list((data_dir / "orders" / "ordered").iterdir())

    def test_checkout_over_quantity_cap(self, run):
        result = _checkout(run, "0008:51")
        assert result.exit_code == 1
        assert "Max allowed: 50" in result.output

    def test_prompted_payment(self, run):
        result = run("customer", "checkout", "--items", "0001:1", input="debit\ny\n")
        assert result.exit_code == 0, result.output
        assert "Total amount: £269.00" in result.output
        assert "Payment: DebitCard" in result.output

    def test_prime_sees_discounted_amount(self, run):
        result = run("customer", "checkout", "--items", "0001:1", "--tier", "prime", "--payment", "credit", input="y\n")
        assert result.exit_code == 0, result.output
        assert "Final amount: £242.10" in result.output

    def test_declined_payment_releases_stock(self, run, data_dir):
        result = run("customer", "checkout", "--items", "0001:2", "--payment", "cash", input="n\n")
        assert result.exit_code == 1
        assert "Payment cancelled" in result.output
        assert _stock(data_dir, "0001") == 10

    def test_save_receipt(self, run, data_dir):
        result = _checkout(run, "0001:1", "--save-receipt")
        assert result.exit_code == 0, result.output
        receipts = list((data_dir / "receipts").iterdir())
        assert len(receipts) == 1
        assert receipts[0].name.startswith("receipt_1_")

    def test_bad_item_format(self, run):
        result = _checkout(run, "0001-1")
        assert result.exit_code == 2
        assert "Expected 'ProductID:Quantity'" in result.output

    def test_unknown_product(self, run):
        result = _checkout(run, "0999:1")
        assert result.exit_code == 1
        assert "Product 0999 is not available" in result.output

    def test_non_positive_quantity(self, run):
        result = _checkout(run, "0001:0")
        assert result.exit_code == 1
        assert "must be positive" in result.output


class TestPickerCommands:

    def test_list_empty(self, run):
        result = run("picker", "list")
        assert result.exit_code == 0
        assert "No orders to pick." in result.output

    def test_list_shows_tier_badge(self, run):
        _checkout(run, "0001:1", "--tier", "VIP")
        result = run("picker", "list")
        assert "Order #1 [VIP]" in result.output
        assert "Ordered" in result.output

    def test_details(self, run):
        _checkout(run)
        result = run("picker", "details", "--id", "1")
        assert result.exit_code == 0
        assert result.output.startswith("State: Ordered\nOrder ID: 1\n")

    def test_set_state_moves_file(self, run, data_dir):
        _checkout(run)
        result = run("picker", "set-state", "--id", "1", "--state", "progressing")
        assert result.exit_code == 0, result.output
        assert "Order #1 is now Progressing" in result.output
        moved = data_dir / "orders" / "progressing" / "1.txt"
        assert moved.read_text(encoding="utf-8").startswith("State: Progressing\n")
        assert not (data_dir / "orders" / "ordered" / "1.txt").exists()

    def test_set_state_unknown_order(self, run):
        result = run("picker", "set-state", "--id", "7", "--state", "ready")
        assert result.exit_code == 1
        assert "Order #7 not found" in result.output

    def test_set_state_rejects_unknown_state(self, run):
        result = run("picker", "set-state", "--id", "1", "--state", "shipped")
        assert result.exit_code == 2


class TestTrackerCommands:

    def test_show(self, run):
        _checkout(run)
        result = run("tracker", "show")
        assert result.exit_code == 0
        assert "Ordered" in result.output

    def test_collected_orders_are_not_reloaded(self, run, data_dir):
        _checkout(run)
        run("picker", "set-state", "--id", "1", "--state", "collected")
        assert (data_dir / "orders" / "collected" / "1.txt").is_file()
        result = run("tracker", "show")
        assert "No orders." in result.output


class TestShell:

    def test_customer_to_tracker_session(self, run):
        script = "\n".join([
            "search 0001",
            "add 1",
            "checkout",
            "cash",
            "y",
            "n",
            "state 1 ready",
            "track",
            "quit",
        ]) + "\n"
        result = run("shell", input=script)
        assert result.exit_code == 0, result.output
        assert "Selected 0001 40 inch TV" in result.output
        assert "Order_ID: 1" in result.output
        assert "[tracker] #1 Ordered" in result.output
        assert "[tracker] #1 Ready" in result.output

    def test_errors_do_not_end_session(self, run):
        result = run("shell", input="add\nfrobnicate\nstate 9 ready\nquit\n")
        assert result.exit_code == 0
        assert "search for an available product" in result.output
        assert "Unknown command 'frobnicate'" in result.output
        assert "Order #9 not found" in result.output

    def test_end_of_input_exits(self, run):
        result = run("shell", input="")
        assert result.exit_code == 0


class TestConfigErrors:

    def test_bad_grace_period(self, data_dir):
        result = CliRunner().invoke(
            cli,
            ["tracker", "show"],
            env={"SHOPHUB_DATA_DIR": str(data_dir), "SHOPHUB_GRACE_PERIOD": "never"},
        )
        assert result.exit_code == 1
        assert "must be a number" in result.output
