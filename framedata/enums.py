"""
Canonical string enumerations for framedata.

StrEnum values serialize as plain strings, so field identifiers can be
used directly as dict keys in JSON payloads and compared to raw literals.
"""

from enum import StrEnum


# ── Frame Data Fields ──────────────────────────────────────────────────

class FieldId(StrEnum):
    """Canonical identifiers for frame data columns."""
    INPUT = "input"
    NAME = "name"
    DAMAGE = "damage"
    CHIP_DAMAGE = "chip_damage"
    DAMAGE_SCALING = "damage_scaling"
    GUARD = "guard"
    CANCEL = "cancel"
    HITCONFIRM_WINDOW = "hitconfirm_window"
    STARTUP = "startup"
    ACTIVE = "active"
    RECOVERY = "recovery"
    TOTAL = "total"
    HITSTUN = "hitstun"
    BLOCKSTUN = "blockstun"
    DRIVE_DAMAGE_BLOCK = "drive_damage_block"
    DRIVE_DAMAGE_HIT = "drive_damage_hit"
    DRIVE_GAIN = "drive_gain"
    SUPER_GAIN_HIT = "super_gain_hit"
    SUPER_GAIN_BLOCK = "super_gain_block"
    PROJECTILE_SPEED = "projectile_speed"
    INVULN = "invuln"
    ARMOR = "armor"
    AIRBORNE = "airborne"
    JUGGLE_START = "juggle_start"
    JUGGLE_INCREASE = "juggle_increase"
    JUGGLE_LIMIT = "juggle_limit"
    PERFECT_PARRY_ADVANTAGE = "perfect_parry_advantage"
    AFTER_DR_HIT = "after_dr_hit"
    AFTER_DR_BLOCK = "after_dr_block"
    DR_CANCEL_HIT = "dr_cancel_hit"
    DR_CANCEL_BLOCK = "dr_cancel_block"
    PUNISH_ADVANTAGE = "punish_advantage"
    ON_HIT = "on_hit"
    ON_BLOCK = "on_block"
    NOTES = "notes"


# ── Load Pipeline ──────────────────────────────────────────────────────

class LoadStage(StrEnum):
    """Per-character pipeline states."""
    PENDING = "pending"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    NORMALIZING = "normalizing"
    BUILT = "built"
    FAILED = "failed"


class FetchErrorKind(StrEnum):
    """Why a raw page could not be retrieved."""
    NOT_FOUND = "not_found"
    NETWORK_ERROR = "network_error"
    RATE_LIMITED = "rate_limited"
