import json

import pytest

from w3.hexutil import A, H
from w3.responses import AccessListResponse, StatusResponse

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
SLOT = "0xf68b260b81af177c0bf1a03b5d62b15aea1b486f8df26c77f33aed7538cfeb2c"


def test_access_list_response_from_json():
    data = json.dumps(
        {
            "accessList": [{"address": WETH.lower(), "storageKeys": [SLOT]}],
            "gasUsed": hex(26050),
        }
    )
    resp = AccessListResponse.from_json(data)
    assert resp == AccessListResponse(access_list=[(A(WETH), [H(SLOT)])], gas_used=26050)


def test_access_list_response_empty():
    resp = AccessListResponse.from_json({"accessList": [], "gasUsed": "0x0"})
    assert resp.access_list == []
    assert resp.gas_used == 0


def test_access_list_response_rejects_leading_zero_gas():
    with pytest.raises(ValueError):
        AccessListResponse.from_json({"accessList": [], "gasUsed": "0x01"})


def test_access_list_response_rejects_non_object():
    with pytest.raises(ValueError):
        AccessListResponse.from_json("[]")


def test_status_response_from_json():
    resp = StatusResponse.from_json('{"pending":"0xa","queued":"0x7"}')
    assert resp == StatusResponse(pending=10, queued=7)


def test_status_response_missing_fields_default_to_zero():
    assert StatusResponse.from_json({}) == StatusResponse()


def test_status_response_rejects_number():
    with pytest.raises(ValueError):
        StatusResponse.from_json({"pending": 10, "queued": "0x7"})


def test_status_response_rejects_null():
    with pytest.raises(ValueError):
        StatusResponse.from_json({"pending": None})