"""CLI tests against the sample shop."""

import pytest

from woodshop.cli.main import cli

TODAY = ["--today", "2024-03-10"]


def test_help(cli_runner):
    """Test that help works without building a store."""
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "dashboard" in result.output


def test_dashboard(cli_runner):
    """Test dashboard figures for the sample shop."""
    result = cli_runner.invoke(cli, TODAY + ["dashboard"])

    assert result.exit_code == 0
    assert "Clients:          1" in result.output
    assert "Active projects:  1" in result.output
    assert "Monthly revenue:  6,000.00" in result.output
    assert "Pending payments: 0.00" in result.output
    assert "Receipt: 6,000.00" in result.output
    assert "New project #1: Custom Kitchen" in result.output


def test_dashboard_without_seed(cli_runner):
    """Test the dashboard of an empty shop."""
    result = cli_runner.invoke(cli, ["--no-seed", "dashboard"])

    assert result.exit_code == 0
    assert "Clients:          0" in result.output
    assert "No activity yet." in result.output


def test_client_list(cli_runner):
    """Test listing clients with their rollups."""
    result = cli_runner.invoke(cli, ["client", "list"])

    assert result.exit_code == 0
    assert "João Silva" in result.output
    assert "CPF 123.456.789-00" in result.output
    assert "Total: 12,000.00" in result.output

    result = cli_runner.invoke(cli, ["--no-seed", "client", "list"])
    assert "No clients found." in result.output


def test_material_list(cli_runner):
    """Test listing materials after the sample sale consumed stock."""
    result = cli_runner.invoke(cli, ["material", "list"])

    assert result.exit_code == 0
    assert "MDF 15mm" in result.output
    assert "Hinge 35mm" in result.output
    assert "Price: 85.50 (+6.88%)" in result.output
    assert "Price: 12.50 (+13.64%)" in result.output
    assert "LOW" not in result.output

    result = cli_runner.invoke(cli, ["material", "list", "--low-stock"])
    assert "No materials found." in result.output


def test_material_price(cli_runner):
    """Test changing a price prints the updated history."""
    result = cli_runner.invoke(
        cli, TODAY + ["material", "price", "MDF 15mm", "R$ 89.90", "--supplier", "Madeireira"]
    )

    assert result.exit_code == 0
    lines = result.output.splitlines()
    history = lines[lines.index("Price history for 'MDF 15mm':") + 1:]
    assert history == [
        "  2024-01-01 | 80.00",
        "  2024-02-01 | 85.50",
        "  2024-03-10 | 89.90 (Madeireira)",
    ]


def test_material_price_unknown(cli_runner):
    """Test changing the price of a missing material."""
    result = cli_runner.invoke(cli, ["material", "price", "Oak", "10"])

    assert result.exit_code == 1
    assert "Error: Material 'Oak' not found" in result.output


def test_material_price_negative(cli_runner):
    """Test that negative prices are reported as errors."""
    result = cli_runner.invoke(cli, ["material", "price", "MDF 15mm", "(10)"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_product_and_stock_lists(cli_runner):
    """Test product components and the stock consumed by the sample sale."""
    result = cli_runner.invoke(cli, ["product", "list"])
    assert result.exit_code == 0
    assert "Cabinet Door 40x60cm" in result.output
    assert "x Hinge 35mm" in result.output

    result = cli_runner.invoke(cli, ["stock", "list"])
    assert result.exit_code == 0
    assert "MDF 15mm" in result.output
    assert "Custom Kitchen" in result.output


def test_project_list(cli_runner):
    """Test listing projects."""
    result = cli_runner.invoke(cli, ["project", "list"])

    assert result.exit_code == 0
    assert "#0001 | Custom Kitchen" in result.output
    assert "in_production" in result.output


def test_project_show(cli_runner):
    """Test showing the sample project."""
    result = cli_runner.invoke(cli, ["project", "show", "1"])

    assert result.exit_code == 0
    assert "Project #0001: Custom Kitchen" in result.output
    assert "Client: João Silva" in result.output
    assert "Payment: 3x 4,000.00" in result.output


def test_project_show_unknown(cli_runner):
    """Test showing a missing project."""
    result = cli_runner.invoke(cli, ["project", "show", "99"])

    assert result.exit_code == 1
    assert "Error: Project #99 not found" in result.output


def test_project_completion(cli_runner):
    """Test completing a project records the final payment."""
    result = cli_runner.invoke(cli, TODAY + ["project", "status", "1", "completed"])

    assert result.exit_code == 0
    assert "Project #0001 is now completed" in result.output
    assert "Deposit" in result.output
    assert "Final Payment" in result.output
    assert result.output.count("6,000.00") == 2


def test_project_status_invalid(cli_runner):
    """Test that unknown statuses are rejected by the CLI."""
    result = cli_runner.invoke(cli, ["project", "status", "1", "cancelled"])
    assert result.exit_code != 0


def test_project_delete(cli_runner):
    """Test deleting a project with confirmation."""
    result = cli_runner.invoke(cli, ["project", "delete", "1"], input="n\n")
    assert "Deletion cancelled." in result.output

    result = cli_runner.invoke(cli, ["project", "delete", "1", "--yes"])
    assert result.exit_code == 0
    assert "Deleted project #1 'Custom Kitchen'" in result.output


def test_project_document(cli_runner):
    """Test printing the sample proposal."""
    result = cli_runner.invoke(
        cli, TODAY + ["project", "document", "1", "--company-name", "Marcenaria Boa Vista"]
    )

    assert result.exit_code == 0
    assert "Marcenaria Boa Vista" in result.output
    assert "COMMERCIAL PROPOSAL" in result.output
    assert "No. 0001" in result.output
    assert "Date: 10/03/2024" in result.output
    assert "Payment method: Credit card" in result.output
    assert "TOTAL: 12,000.00" in result.output
    assert "This quote is valid for 30 days." in result.output
    assert "Page 1/1" in result.output
    assert "Suggested file name: sale_0001_João_Silva.pdf" in result.output


def test_transaction_list(cli_runner):
    """Test listing transactions, also filtered by project."""
    result = cli_runner.invoke(cli, ["transaction", "list", "--project", "1"])

    assert result.exit_code == 0
    assert "+    6,000.00 | Deposit" in result.output

    result = cli_runner.invoke(cli, ["--no-seed", "transaction", "list"])
    assert "No transactions found." in result.output


@pytest.mark.parametrize("value", ["someday", "31/31/2024"])
def test_invalid_today(cli_runner, value):
    """Test that an unparsable --today is rejected."""
    result = cli_runner.invoke(cli, ["--today", value, "dashboard"])

    assert result.exit_code == 1
    assert "Invalid --today" in result.output
