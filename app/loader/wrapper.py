"""
Execution: wrap_script(content, script_id, token, timestamp) -> str.
Оборачивает Lua-скрипт в проверку окружения клиента и pcall-обёртку.
Проверка окружения: обфускация, а не граница безопасности.
Тело скрипта только сдвигается на два пробела: число строк не меняется,
поэтому номера строк в ошибках остаются осмысленными.
"""
from __future__ import annotations

BODY_INDENT = "  "

_PROTECTION_HEADER = """
-- Anti-dump protection layer
local function _verify()
  local success, result = pcall(function()
    -- Check if running in Roblox environment
    if not game or not game.GetService then
      return false
    end

    -- Check for common dump indicators
    local Players = game:GetService("Players")
    local LocalPlayer = Players.LocalPlayer
    if not LocalPlayer then
      return false
    end

    -- Heartbeat verification
    local RunService = game:GetService("RunService")
    if not RunService:IsClient() then
      return false
    end

    return true
  end)

  return success and result
end

if not _verify() then
  warn("[Security] Nice try buddy - unauthorized access detected")
  return
end
"""

_EXECUTION_FOOTER = """end

-- Run with error handling
local success, err = pcall(_execute)
if not success then
  warn("[Script Error] " .. tostring(err))
end
"""


def wrap_script(script_content: str, script_id: str, token: str, timestamp: int) -> str:
    """Собрать защищённый payload: _verify -> константы -> _execute под pcall."""
    constants = (
        "\n-- Dynamic token validation\n"
        f"local _token = {lua_string(token)}\n"
        f"local _timestamp = {int(timestamp)}\n"
        f"local _scriptId = {lua_string(script_id)}\n"
    )
    return "".join([
        _PROTECTION_HEADER,
        constants,
        "\n-- Execute protected content\n",
        "local function _execute()\n",
        indent_body(script_content),
        "\n",
        _EXECUTION_FOOTER,
    ])


def indent_body(script_content: str) -> str:
    return "\n".join(BODY_INDENT + line for line in script_content.split("\n"))


def lua_string(value: str) -> str:
    """Lua-литерал в двойных кавычках."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'
