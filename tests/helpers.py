def assert_sections_in_order(prompt, *sections):
    """
    Assert that each section appears in the prompt, in the given order.
    """
    position = -1
    for section in sections:
        index = prompt.find(section, position + 1)
        assert index != -1, f"Section {section!r} not found after position {position} in prompt:\n{prompt}"
        assert index > position, f"Section {section!r} is out of order in prompt:\n{prompt}"
        position = index


def assert_error_response(response, status_code, kind):
    """Assert the JSON error body produced for assistant errors."""
    assert response.status_code == status_code, f"Expected {status_code}, got {response.status_code}: {response.text}"
    payload = response.json()
    assert payload["error"] == kind, f"Expected error kind {kind!r}, got {payload}"
    assert payload["message"], "Error message is empty."
