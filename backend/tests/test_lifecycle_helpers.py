"""Reusable test helpers for the order lifecycle to reduce duplication.

Patterns unified:
 - Auth header creation using direct JWT claims (bypassing /auth/login).
 - Creation + transition sequencing with assertion helpers.
"""
from __future__ import annotations
from typing import Dict, List
from flask_jwt_extended import create_access_token

# ---------- Generic Auth Helpers ---------- #

def jwt_headers(user_id: int, perms: List[str]):
    token = create_access_token(identity=str(user_id), additional_claims={'perms': perms})
    return {'Authorization': f'Bearer {token}'}

# ---------- Assertion Helpers ---------- #

def assert_transition(client, order_id: str, headers: Dict[str, str], target: str, expected_status: int = 200):
    resp = client.patch('/orders', json={'id': order_id, 'status': target}, headers=headers)
    assert resp.status_code == expected_status, resp.get_json()
    if expected_status < 400:
        assert resp.get_json()['status'] == target
    return resp


def create_order_and_assert(client, payload: dict = None, expected_status: int = 201):
    body = {
        'customer_name': 'Alice',
        'contact': '+62 812 0000',
        'file_name': 'thesis.pdf',
        'color_mode': 'bw',
        'copies': 1,
    }
    body.update(payload or {})
    resp = client.post('/orders', json=body)
    assert resp.status_code == expected_status, resp.get_json()
    data = resp.get_json()
    if expected_status == 201:
        assert data['status'] == 'pending'
    return data

# ---------- Domain Specific Wrappers ---------- #

def exercise_order_to_delivered(client, order_id: str, headers):
    for target in ('printing', 'completed', 'delivered'):
        resp = assert_transition(client, order_id, headers, target)
    return resp.get_json()


def test_exercise_order_to_delivered(client, admin_headers):
    order = create_order_and_assert(client)
    final = exercise_order_to_delivered(client, order['id'], admin_headers)
    assert final['status'] == 'delivered'
    assert final['file_expires_at'] is not None


__all__ = ['jwt_headers', 'assert_transition', 'create_order_and_assert', 'exercise_order_to_delivered']
