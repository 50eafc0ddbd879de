"""
Control Protocol Constants

OBS WebSocket (v5) opcodes and the logical actions the recorder drives.
Only the tiny subset needed to trigger hotkeys is modelled.
"""

from enum import Enum

from config.settings import HOTKEY_RESET, HOTKEY_START, HOTKEY_STOP

# =============================================================================
# WIRE PROTOCOL
# =============================================================================

OP_HELLO = 0
OP_IDENTIFY = 1
OP_IDENTIFIED = 2
OP_EVENT = 5
OP_REQUEST = 6
OP_REQUEST_RESPONSE = 7

REQUEST_TYPE_TRIGGER_HOTKEY = "TriggerHotkeyByKeySequence"

# requestStatus.code meaning success
STATUS_SUCCESS = 100


class ControlAction(Enum):
    """Logical capture-tool actions, bound to OBS hotkeys."""

    RESET = "reset"  # reset/arm the replay source
    START = "start"
    STOP = "stop"


# Default hotkey bindings (overridable through RecorderConfig)
DEFAULT_HOTKEYS = {
    ControlAction.RESET: HOTKEY_RESET,
    ControlAction.START: HOTKEY_START,
    ControlAction.STOP: HOTKEY_STOP,
}


def build_identify_message(rpc_version: int) -> dict:
    return {"op": OP_IDENTIFY, "d": {"rpcVersion": rpc_version}}


def build_hotkey_request(request_id: str, key_id: str) -> dict:
    """
    Build the request that presses a hotkey in OBS.

    Example:
        build_hotkey_request("3", "OBS_KEY_F7")
        # {"op": 6, "d": {"requestType": "TriggerHotkeyByKeySequence",
        #                 "requestId": "3", "requestData": {"keyId": "OBS_KEY_F7"}}}
    """
    return {
        "op": OP_REQUEST,
        "d": {
            "requestType": REQUEST_TYPE_TRIGGER_HOTKEY,
            "requestId": request_id,
            "requestData": {"keyId": key_id},
        },
    }
