"""Detection of editor plugins installed through nixpkgs.

VSCode extensions, JetBrains plugins and Neovim plugins are not versioned
independently; they follow whatever nixpkgs revision is used.
"""

VSCODE_INSTALL_PREFIX = "vscode+install="
_VSCODE_PREFIXES = ("vscode+install=vscode-extensions.", "vscode-extensions.")
_JETBRAINS_PREFIXES = ("jetbrains+install=", "jetbrains-plugins.")
_NEOVIM_PREFIXES = ("neovim+install=vimPlugins.", "vimPlugins.")


def is_vscode_extension(tool: str) -> bool:
    return bool(tool) and tool.startswith(_VSCODE_PREFIXES)


def is_vscode_install(tool: str) -> bool:
    """True for the ``vscode+install=...`` form only."""
    return is_vscode_extension(tool) and tool.startswith(VSCODE_INSTALL_PREFIX)


def is_jetbrains_plugin(tool: str) -> bool:
    return bool(tool) and tool.startswith(_JETBRAINS_PREFIXES)


def is_neovim_plugin(tool: str) -> bool:
    return bool(tool) and tool.startswith(_NEOVIM_PREFIXES)


def is_marketplace_plugin(tool: str) -> bool:
    """True for tools whose only version is "latest"."""
    return is_jetbrains_plugin(tool) or is_neovim_plugin(tool) or is_vscode_install(tool)
