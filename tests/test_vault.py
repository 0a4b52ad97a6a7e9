"""
Tests for the token vault: protection, restoration and token rules.
"""

import pytest

from potstranslate.protection import (
    CODE_TOKEN,
    PatternStrategy,
    ProtectionKind,
    TokenCollisionError,
    TokenLookupError,
    TokenVault,
    preserve_codes,
    restore_codes,
)
from potstranslate.protection.vault import PLACEHOLDER_PATTERN


class TestProtect:
    """Protection output for each category."""

    def test_placeholder_becomes_token(self):
        protected = TokenVault().protect("Hello %s")
        assert protected.text == "Hello ##PH0##"
        assert protected.tokens[ProtectionKind.PLACEHOLDER][0].original_value == "%s"

    def test_all_categories(self):
        protected = TokenVault().protect("Use <b>@warp</b> to go %s, 100%% sure %2$d")
        assert protected.text == (
            "Use ##XML0####AT0####XML1## to go ##PH0##, 100##PH1## sure ##PH2##"
        )
        assert [t.original_value for t in protected.tokens[ProtectionKind.XML_TAG]] == ["<b>", "</b>"]
        assert [t.original_value for t in protected.tokens[ProtectionKind.AT_COMMAND]] == ["@warp"]
        assert [t.original_value for t in protected.tokens[ProtectionKind.PLACEHOLDER]] == ["%s", "%%", "%2$d"]

    def test_placeholders_are_case_insensitive(self):
        protected = TokenVault().protect("%S and %D")
        assert protected.text == "##PH0## and ##PH1##"

    def test_plain_percent_is_not_a_placeholder(self):
        assert TokenVault().protect("100% done").text == "100% done"

    def test_protection_order_is_recorded(self):
        protected = TokenVault().protect("text")
        assert protected.applied == [
            ProtectionKind.ESCAPE,
            ProtectionKind.WORD_DICT,
            ProtectionKind.XML_TAG,
            ProtectionKind.AT_COMMAND,
            ProtectionKind.PLACEHOLDER,
        ]

    def test_tokens_are_unique_per_kind_and_index(self):
        protected = TokenVault(words={"Zeny": "Zenys"}).protect("Zeny %s <i>%d</i> @a @b Zeny %s")
        pairs = [(t.kind, t.index) for t in protected.all_tokens()]
        assert len(pairs) == len(set(pairs))
        assert protected.token_count == len(pairs)

    def test_token_shaped_literal_is_rejected(self):
        with pytest.raises(TokenCollisionError):
            TokenVault().protect("literal ##PH0## in the source")

    def test_each_kind_only_once(self):
        strategy = PatternStrategy(ProtectionKind.PLACEHOLDER, PLACEHOLDER_PATTERN)
        with pytest.raises(ValueError):
            TokenVault(strategies=[strategy, strategy])


class TestWordDictionary:
    """Word-dictionary protection."""

    def test_longest_key_wins(self):
        vault = TokenVault(words={"log": "registro", "login": "entrar"})
        protected = vault.protect("login failed")
        assert protected.text == "##WD0## failed"
        assert protected.tokens[ProtectionKind.WORD_DICT][0].original_value == "entrar"

    def test_shorter_key_still_matches_elsewhere(self):
        vault = TokenVault(words={"log": "registro", "login": "entrar"})
        protected = vault.protect("login to read the log")
        assert protected.text == "##WD0## to read the ##WD1##"
        assert vault.restore(protected.text, protected) == "entrar to read the registro"

    def test_whole_word_and_case_sensitive(self):
        protected = TokenVault(words={"Zeny": "Zenys"}).protect("zeny Zenyx Zeny")
        assert protected.text == "zeny Zenyx ##WD0##"

    def test_restore_writes_dictionary_value(self):
        vault = TokenVault(words={"Zeny": "Zenys"})
        protected = vault.protect("You got 10 Zeny")
        assert vault.restore("Você ganhou 10 ##WD0##", protected) == "Você ganhou 10 Zenys"

    def test_markup_inside_dictionary_value_is_not_reprotected(self):
        vault = TokenVault(words={"Bold": "<b>Negrito</b> %s"})
        protected = vault.protect("Bold %d")
        assert protected.text == "##WD0## ##PH0##"
        assert vault.restore(protected.text, protected) == "<b>Negrito</b> %s %d"


class TestRestore:
    """Restoration behaviour."""

    def test_scenario_hello(self):
        vault = TokenVault()
        protected = vault.protect("Hello %s")
        assert vault.restore("Olá ##PH0##", protected) == "Olá %s"

    @pytest.mark.parametrize("text", [
        "Hello %s",
        "<color=red>@item_name</color> costs %d zeny (%%)",
        "Talk to @npc about <b>%1$s</b>",
        "No protected parts at all",
        "",
    ])
    def test_round_trip_without_translation(self, text):
        vault = TokenVault()
        protected = vault.protect(text)
        assert vault.restore(protected.text, protected) == text

    def test_tolerates_spacing_and_case(self):
        vault = TokenVault()
        protected = vault.protect("<b>%s</b>")
        assert vault.restore("## xml 0 ##Olá## Ph0 ####XML1##", protected) == "<b>Olá%s</b>"

    def test_out_of_range_index_raises(self):
        vault = TokenVault()
        protected = vault.protect("Hello %s")
        with pytest.raises(TokenLookupError) as excinfo:
            vault.restore("Olá ##PH3##", protected)
        assert excinfo.value.index == 3
        assert excinfo.value.kind == ProtectionKind.PLACEHOLDER


class TestControlCodes:
    def test_carriage_return_round_trip(self):
        text = "Line one\rLine two"
        preserved = preserve_codes(text)
        assert "\r" not in preserved
        assert CODE_TOKEN in preserved
        assert restore_codes(preserved) == text


class TestEscapes:
    """PO backslash escapes never reach the translator."""

    def test_escapes_become_tokens(self):
        protected = TokenVault().protect('Line one\\nSay \\"hi\\"')
        assert protected.text == "Line one##ESC0##Say ##ESC1##hi##ESC2##"
        assert "\\" not in protected.text

    def test_escapes_restored_after_markup(self):
        vault = TokenVault()
        protected = vault.protect('<color=\\"red\\">%s</color>\\n')
        assert protected.text == "##XML0####PH0####XML1####ESC2##"
        assert vault.restore(protected.text, protected) == '<color=\\"red\\">%s</color>\\n'

    def test_word_next_to_escape_is_protected(self):
        vault = TokenVault(words={"Zeny": "Zenys"})
        protected = vault.protect("Total:\\nZeny")
        assert protected.text == "Total:##ESC0####WD0##"
        assert vault.restore(protected.text, protected) == "Total:\\nZenys"

    def test_escape_token_literal_is_rejected(self):
        with pytest.raises(TokenCollisionError):
            TokenVault().protect("already ##ESC0## here")
