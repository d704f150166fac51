"""
Unit tests for the XML codec.
"""
import pytest

from wxpay.exceptions import ValidationError
from wxpay.services.codec import is_xml, map_to_xml, xml_to_map


class TestMapToXml:

    def test_numbers_plain_strings_cdata(self):
        xml = map_to_xml({"total_fee": 999, "body": "Test"})
        assert xml == "<xml><total_fee>999</total_fee><body><![CDATA[Test]]></body></xml>"

    def test_none_skipped(self):
        assert map_to_xml({"attach": None}) == "<xml></xml>"

    def test_cdata_terminator_escaped(self):
        xml = map_to_xml({"attach": "a]]>b"})
        assert xml_to_map(xml) == {"attach": "a]]>b"}


class TestXmlToMap:

    def test_parse_gateway_response(self):
        text = (
            "<xml><return_code><![CDATA[SUCCESS]]></return_code>"
            "<return_msg><![CDATA[OK]]></return_msg>"
            "<total_fee>999</total_fee>"
            "<code_url><![CDATA[weixin://wxpay/bizpayurl?pr=8IsTQ5Z]]></code_url></xml>"
        )
        assert xml_to_map(text) == {
            "return_code": "SUCCESS",
            "return_msg": "OK",
            "total_fee": "999",
            "code_url": "weixin://wxpay/bizpayurl?pr=8IsTQ5Z",
        }

    def test_empty_element(self):
        assert xml_to_map("<xml><attach></attach></xml>") == {"attach": ""}

    def test_malformed(self):
        with pytest.raises(ValidationError):
            xml_to_map("<xml><a>")

    def test_is_xml(self):
        assert is_xml("  <xml></xml>")
        assert not is_xml("交易时间,公众账号ID")
