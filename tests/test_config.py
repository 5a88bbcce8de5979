from linkrouter.config import (
    BehavioralConfig,
    Config,
    ConfiguredTheme,
    ConfigRule,
    ProfileAndOptions,
    UIConfig,
)


def test_hide_profile_is_idempotent():
    config = Config()
    config.hide_profile("app#p1")
    config.hide_profile("app#p1")
    assert config.hidden_profiles == ["app#p1"]


def test_hide_all_profiles_adds_each_once():
    config = Config(hidden_profiles=["app#a"])
    config.hide_all_profiles(["app#a", "app#b", "app#c"])
    assert config.hidden_profiles == ["app#a", "app#b", "app#c"]


def test_restore_profile_removes_only_that_profile():
    config = Config()
    config.hide_all_profiles(["app#a", "app#b"])
    config.restore_profile("app#a")
    assert config.hidden_profiles == ["app#b"]


def test_restore_unknown_profile_leaves_config_alone():
    config = Config(hidden_profiles=["app#a"])
    config.restore_profile("missing")
    assert config.hidden_profiles == ["app#a"]


def test_set_profile_order_copies():
    order = ["x#1", "y#2"]
    config = Config()
    config.set_profile_order(order)
    order.append("z#3")
    assert config.profile_order == ["x#1", "y#2"]


def test_set_rules_and_default_profile():
    rule = ConfigRule(source_app="com.example.app", url_pattern="example.com/**",
                      opener=ProfileAndOptions("firefox#default", True))
    config = Config()
    config.set_rules([rule])
    config.set_default_profile(ProfileAndOptions("chrome#Default"))
    assert config.rules == [rule]
    assert config.default_profile == ProfileAndOptions("chrome#Default", False)
    config.set_default_profile(None)
    assert config.default_profile is None


def test_set_ui_config_and_behavior():
    config = Config()
    ui = UIConfig(show_hotkeys=False, quit_on_lost_focus=False, theme=ConfiguredTheme.DARK)
    config.set_ui_config(ui)
    config.set_behavior(BehavioralConfig(unwrap_urls=False))
    assert config.ui == ui
    assert config.behavior.unwrap_urls is False


def test_configured_theme_names():
    assert ConfiguredTheme("Light") is ConfiguredTheme.LIGHT
    assert ConfiguredTheme("Auto") is ConfiguredTheme.AUTO