from suiarb import links

TX_DIGEST = "WQ346mGc8sLjtcBPBfJNvTxCWar7U7Fsow9rTkmXgyE"
OBJECT_ID = "0xb8d7d9e66a60c239e7a60110efcf8de6c705580ed924d0dde141f4a0e2c90105"
ADDRESS = "0xac5bceec1b789ff840d7d4e6ce4ce61c90d190a7f8c4f4ddf0bff6ee2413c33c"
COIN_TYPE = "0xa8816d3a6e3136e86bc2873b1f94a15cadc8af2703c075f2d546c2ae367f4df9::ocean::OCEAN"
CHECKPOINT_DIGEST = "AYWtSh7XWdBiRaEyh4oq3pxoaPmLkPJ6U1LBdwHuEXT"


def test_tx_default_label():
    assert links.tx(TX_DIGEST, None) == f"[{TX_DIGEST}](https://suiscan.xyz/mainnet/tx/{TX_DIGEST})"


def test_tx_with_tag():
    assert links.tx(TX_DIGEST, "swap") == f"[swap](https://suiscan.xyz/mainnet/tx/{TX_DIGEST})"


def test_object_link():
    assert links.object(OBJECT_ID, None) == f"[{OBJECT_ID}](https://suiscan.xyz/mainnet/object/{OBJECT_ID})"
    assert links.object(OBJECT_ID, "pool").startswith("[pool](")


def test_account_link():
    assert (
        links.account(ADDRESS, None)
        == f"[{ADDRESS}](https://suiscan.xyz/mainnet/account/{ADDRESS}/portfolio)"
    )


def test_coin_link():
    assert links.coin(COIN_TYPE, "OCEAN") == f"[OCEAN](https://suiscan.xyz/mainnet/coin/{COIN_TYPE}/txs)"
    assert links.coin(COIN_TYPE, None).startswith(f"[{COIN_TYPE}](")


def test_checkpoint_link_labelled_by_number():
    assert (
        links.checkpoint(CHECKPOINT_DIGEST, 1234)
        == f"[1234](https://suiscan.xyz/mainnet/checkpoint/{CHECKPOINT_DIGEST})"
    )