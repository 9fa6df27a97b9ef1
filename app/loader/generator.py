"""
Генератор скачиваемого loader (.lua): показывает окно загрузки в цветах темы,
тянет GET {base_url}/script-loader/{script_id} и исполняет ответ через loadstring.
"""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from app.loader.config import get_loader_base_url
from app.loader.wrapper import lua_string


class ThemeColor(BaseModel):
    r: int = Field(139, ge=0, le=255)
    g: int = Field(92, ge=0, le=255)
    b: int = Field(246, ge=0, le=255)

    model_config = {"frozen": True}


_LOADER_TEMPLATE = """--[[
    {title} Loader
    Protected by ScriptGuard
    Generated: {generated_at}
]]--

local HttpService = game:GetService("HttpService")

-- Theme Configuration
local THEME = {{
    Primary = Color3.fromRGB({r}, {g}, {b}),
    Background = Color3.fromRGB(20, 20, 30),
    Text = Color3.fromRGB(255, 255, 255),
    Secondary = Color3.fromRGB(100, 100, 120)
}}

-- Loading UI
local function showLoadingUI()
    local ScreenGui = Instance.new("ScreenGui")
    ScreenGui.Name = "ScriptGuardLoader"
    ScreenGui.ResetOnSpawn = false

    local Frame = Instance.new("Frame")
    Frame.Size = UDim2.new(0, 400, 0, 180)
    Frame.Position = UDim2.new(0.5, -200, 0.5, -90)
    Frame.BackgroundColor3 = THEME.Background
    Frame.BorderSizePixel = 0
    Frame.Parent = ScreenGui

    local Corner = Instance.new("UICorner")
    Corner.CornerRadius = UDim.new(0, 12)
    Corner.Parent = Frame

    local Stroke = Instance.new("UIStroke")
    Stroke.Color = THEME.Primary
    Stroke.Thickness = 2
    Stroke.Parent = Frame

    local Title = Instance.new("TextLabel")
    Title.Size = UDim2.new(1, 0, 0, 30)
    Title.Position = UDim2.new(0, 0, 0, 30)
    Title.BackgroundTransparency = 1
    Title.Font = Enum.Font.GothamBold
    Title.TextSize = 18
    Title.TextColor3 = THEME.Text
    Title.Text = {name_literal}
    Title.Parent = Frame

    local Status = Instance.new("TextLabel")
    Status.Size = UDim2.new(1, 0, 0, 20)
    Status.Position = UDim2.new(0, 0, 0, 70)
    Status.BackgroundTransparency = 1
    Status.Font = Enum.Font.Gotham
    Status.TextSize = 12
    Status.TextColor3 = THEME.Secondary
    Status.Text = "Loading script..."
    Status.Parent = Frame

    local ProgressBg = Instance.new("Frame")
    ProgressBg.Size = UDim2.new(0.8, 0, 0, 6)
    ProgressBg.Position = UDim2.new(0.1, 0, 0, 110)
    ProgressBg.BackgroundColor3 = Color3.fromRGB(40, 40, 50)
    ProgressBg.BorderSizePixel = 0
    ProgressBg.Parent = Frame

    local ProgressFill = Instance.new("Frame")
    ProgressFill.Size = UDim2.new(0, 0, 1, 0)
    ProgressFill.BackgroundColor3 = THEME.Primary
    ProgressFill.BorderSizePixel = 0
    ProgressFill.Parent = ProgressBg

    local Credits = Instance.new("TextLabel")
    Credits.Size = UDim2.new(1, 0, 0, 20)
    Credits.Position = UDim2.new(0, 0, 1, -30)
    Credits.BackgroundTransparency = 1
    Credits.Font = Enum.Font.Gotham
    Credits.TextSize = 10
    Credits.TextColor3 = THEME.Secondary
    Credits.Text = "Protected by ScriptGuard"
    Credits.Parent = Frame

    ScreenGui.Parent = game:GetService("CoreGui")

    return {{
        Gui = ScreenGui,
        Status = Status,
        Progress = ProgressFill
    }}
end

-- Main Loader
local function loadScript()
    local UI = showLoadingUI()

    spawn(function()
        for i = 1, 100 do
            UI.Progress.Size = UDim2.new(i/100, 0, 1, 0)
            wait(0.02)
        end
    end)

    UI.Status.Text = "Fetching script..."
    wait(0.5)

    local success, result = pcall(function()
        return game:HttpGet({url_literal})
    end)

    if success then
        UI.Status.Text = "Executing..."
        wait(0.3)
        UI.Gui:Destroy()

        local scriptFunc, loadErr = loadstring(result)
        if scriptFunc then
            scriptFunc()
        else
            warn("[ScriptGuard] Load error:", loadErr)
        end
    else
        UI.Status.Text = "Failed to load script"
        UI.Status.TextColor3 = Color3.fromRGB(255, 100, 100)
        warn("[ScriptGuard] Fetch error:", result)
        wait(3)
        UI.Gui:Destroy()
    end
end

loadScript()
"""


def loader_url(script_id: str, base_url: str | None = None) -> str:
    base = (base_url if base_url is not None else get_loader_base_url()).rstrip("/")
    return f"{base}/script-loader/{script_id}"


def generate_loader_script(
    script_name: str,
    script_id: str,
    *,
    base_url: str | None = None,
    theme_color: ThemeColor | None = None,
    generated_at: datetime | None = None,
) -> str:
    color = theme_color or ThemeColor()
    stamp = (generated_at or datetime.now(timezone.utc)).isoformat()
    return _LOADER_TEMPLATE.format(
        # имя в блочном комментарии: "]]" закрыло бы комментарий раньше времени
        title=script_name.replace("]]", "] ]"),
        generated_at=stamp,
        r=color.r,
        g=color.g,
        b=color.b,
        name_literal=lua_string(script_name),
        url_literal=lua_string(loader_url(script_id, base_url)),
    )


def loader_filename(name: str) -> str:
    return name if name.endswith(".lua") else f"{name}.lua"
