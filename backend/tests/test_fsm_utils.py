from printdesk.utils.fsm import TransitionValidator
from printdesk.errors import InvalidTransition, ValidationError
import pytest


def test_transition_validator_allows_valid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    assert fsm.assert_can_transition('A', 'B') is True


def test_transition_validator_blocks_invalid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    with pytest.raises(InvalidTransition) as exc:
        fsm.assert_can_transition('A', 'C')
    assert isinstance(exc.value, ValidationError)
    assert exc.value.status == 400
    assert 'A -> C' in exc.value.detail


def test_transition_validator_terminal_states():
    fsm = TransitionValidator({'A': {'B', 'C'}, 'B': set(), 'C': set()})
    assert fsm.allowed_from('A') == ['B', 'C']
    assert fsm.terminal_states() == ['B', 'C']
    assert fsm.allowed_from('missing') == []


def test_openapi_exports_transitions(client):
    # The runtime state machine is what the OpenAPI document publishes
    resp = client.get('/openapi.json')
    body = resp.get_json()
    order_schema = body['components']['schemas']['Order']
    assert 'x-transitions' in order_schema
    assert order_schema['x-transitions']['pending'] == ['cancelled', 'printing']
    assert order_schema['x-transitions']['delivered'] == []
