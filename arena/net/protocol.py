# Message types

# client -> server
JOIN = "join"
MOVE = "move"
MOVE_INTENT = "moveIntent"
UPDATE_PETALS = "updatePetals"
COMBINE_PETALS = "combinePetals"
SET_NAME = "setName"
CHAT = "chat"
ATTACK_TICK = "attackTick"

# server -> client
WELCOME = "welcome"
INIT = "init"
UPDATE = "update"
STATE = "state"
RESPAWN = "respawn"

# produced locally by the net client when the channel goes away
DISCONNECT = "_disconnect"

WELCOME_TYPES = {WELCOME, INIT}
SNAPSHOT_TYPES = {UPDATE, STATE}

# snapshot ordering keys, first present wins
SEQ_KEYS = ("seq", "tick", "timestamp")

COMBINE_COUNT = 3


def join(name: str) -> dict:
    return {"type": JOIN, "name": name}

def move(x: float, y: float) -> dict:
    return {"type": MOVE, "x": float(x), "y": float(y)}

def move_intent(dx: float, dy: float, retract: bool = False) -> dict:
    return {"type": MOVE_INTENT, "dx": float(dx), "dy": float(dy), "retract": bool(retract)}

def update_petals(hotbar: list, inventory: list) -> dict:
    return {"type": UPDATE_PETALS, "hotbar": hotbar, "inventory": inventory}

def combine_petals(indices) -> dict:
    return {"type": COMBINE_PETALS, "indices": [int(i) for i in indices]}

def set_name(name: str) -> dict:
    return {"type": SET_NAME, "name": name}

def chat(message: str) -> dict:
    return {"type": CHAT, "message": message}

def attack_tick() -> dict:
    return {"type": ATTACK_TICK}
