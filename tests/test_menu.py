"""
MenuTreeWalker tests - leaf collection order and empty menus.
"""
import pytest

from dsbmobile.codec import PayloadCodec
from dsbmobile.errors import EmptyResultError
from dsbmobile.menu import collect_leaves
from dsbmobile.models import MenuNode, ResponseEnvelope

from dsb_builder import BASE, compress_response, menu_document


class TestCollectLeaves:

    def test_leaves_in_source_order_for_single_and_list_childs(self):
        urls = [f"{BASE}/a/subst_001.htm", f"{BASE}/b/subst_001.htm", f"{BASE}/c/plan.jpg"]

        envelope = PayloadCodec.decode(compress_response(menu_document(urls)))

        assert collect_leaves(envelope) == urls

    def test_single_child_node_is_normalized_to_list(self):
        node = MenuNode.model_validate({"Childs": {"Detail": "x.htm"}})

        assert len(node.childs) == 1
        assert node.children[0].detail == "x.htm"
        assert collect_leaves(node) == ["x.htm"]

    def test_deeply_nested_mixed_shapes(self):
        tree = MenuNode.model_validate({
            "Childs": [
                {"Childs": {"Childs": [{"Detail": "1.htm"}, {"Detail": "2.htm"}]}},
                {"Detail": "3.htm"},
                {"Root": {"Childs": {"Detail": "4.htm"}}},
            ]
        })

        assert collect_leaves(tree) == ["1.htm", "2.htm", "3.htm", "4.htm"]

    def test_empty_details_are_not_leaves(self):
        tree = [MenuNode.model_validate({"Childs": [{"Detail": ""}, {"Detail": "a.htm"}]})]

        assert collect_leaves(tree) == ["a.htm"]

    def test_no_leaves_raises(self):
        envelope = ResponseEnvelope.model_validate(
            {"Resultcode": 0, "ResultStatusInfo": "", "ResultMenuItems": []}
        )

        with pytest.raises(EmptyResultError, match="could not be found"):
            collect_leaves(envelope)

    def test_branches_without_details_raise(self):
        tree = MenuNode.model_validate({"Childs": [{"Childs": []}, {"Title": "leer"}]})

        with pytest.raises(EmptyResultError):
            collect_leaves(tree)
