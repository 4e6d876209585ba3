"""
list_transfers CLI: JSON output and exit codes. RichClient is patched out.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

from conflux_wallet.core.exceptions import (
    ApplicationError,
    BatchEnrichmentFailed,
    PerItemEnrichmentError,
    RequestFailed,
)
from conflux_wallet.scan_client.models import TransferPage, TransferRecord
from conflux_wallet.tools import list_transfers

ADDRESS = "0x1aa0000000000000000000000000000000000001"


def _patched_client(**kwargs):
    client = MagicMock()
    client.get_account_token_transfers.configure_mock(**kwargs)
    return patch.object(list_transfers.RichClient, "from_settings", return_value=client), client


def test_prints_enriched_page(capsys):
    page = TransferPage(
        total=1,
        records=[TransferRecord("0xt", ADDRESS, "0xb", 3, block_hash="0xblk", revert_rate=0.0)],
    )
    patcher, client = _patched_client(return_value=page)
    with patcher:
        code = list_transfers.main(["--address", ADDRESS, "--page-size", "5"])

    assert code == 0
    client.get_account_token_transfers.assert_called_once_with(ADDRESS, None, 1, 5)
    out = json.loads(capsys.readouterr().out)
    assert out["total"] == 1
    assert out["list"][0]["block_hash"] == "0xblk"
    assert out["list"][0]["revert_rate"] == 0.0


def test_enrichment_failure_exit_code():
    err = BatchEnrichmentFailed([PerItemEnrichmentError(0, "0xt", "resolve block for tx 0xt: boom")])
    patcher, _ = _patched_client(side_effect=err)
    with patcher:
        assert list_transfers.main(["--address", ADDRESS, "--token", "0x8cc"]) == 1


def test_server_failure_exit_code():
    err = RequestFailed("get result of scan backend server", ApplicationError(1, "bad"))
    patcher, _ = _patched_client(side_effect=err)
    with patcher:
        assert list_transfers.main(["--address", ADDRESS]) == 1
