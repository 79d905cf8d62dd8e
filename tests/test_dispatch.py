"""Tests for the command dispatcher."""

import pytest

from clicore.models import CommandClass, UsageError

from .testtools import Recorder, failing_handler


class TestExecute:
    """Running commands."""

    def test_handler_receives_args(self, registry, dispatcher):
        """Arguments and the tty flag are passed through."""
        handler = Recorder()
        node = registry.add_com("run", CommandClass.RUN, handler, "doc")
        dispatcher.execute(node, "a b", from_tty=True)
        assert handler.calls == [("a b", True)]

    def test_help_topic(self, registry, dispatcher):
        """Help topics can't be executed."""
        node = registry.insert("running", CommandClass.RUN, "Running the program.")
        with pytest.raises(UsageError, match="just a help topic"):
            dispatcher.execute(node)

    def test_alias(self, registry, dispatcher):
        """An alias runs its target."""
        handler = Recorder()
        node = registry.add_com("backtrace", CommandClass.STACK, handler, "doc")
        alias = registry.add_com_alias("bt", node, CommandClass.STACK)
        dispatcher.execute(alias, "full")
        assert handler.calls == [("full", False)]

    def test_repeat_flags_reset(self, registry, dispatcher, repeat):
        """Every run starts repeatable, without repeat arguments."""
        repeat.dont_repeat()
        repeat.set_repeat_arguments("x")
        handler = Recorder()
        dispatcher.execute(registry.add_com("run", CommandClass.RUN, handler, "doc"))
        assert not repeat.no_repeat
        assert repeat.repeat_arguments is None

    def test_nested_run_keeps_repeat_flags(self, registry, dispatcher, repeat):
        """Commands run by another command leave the repetition flags alone."""
        repeat.dont_repeat()
        repeat.set_repeat_arguments("x")
        handler = Recorder()
        dispatcher.execute(registry.add_com("step", CommandClass.RUN, handler, "doc"), top_level=False)
        assert handler.calls == [("", False)]
        assert repeat.no_repeat
        assert repeat.repeat_arguments == "x"

    def test_handler_errors_propagate(self, registry, dispatcher):
        """Handler exceptions reach the caller unchanged."""
        error = UsageError("boom")
        node = registry.add_com("fail", CommandClass.USER, failing_handler(error), "doc")
        with pytest.raises(UsageError) as excinfo:
            dispatcher.execute(node)
        assert excinfo.value is error


class TestSuppressNotification:
    """Notification suppression while a command runs."""

    def test_raised_while_running(self, registry, dispatcher, notifications):
        """The flag is raised during the command and restored after."""
        seen = []
        registry.insert_suppress_notification(
            "thread",
            CommandClass.RUN,
            "doc",
            lambda args, from_tty: seen.append(notifications.user_selected_context),
            "user_selected_context",
        )
        dispatcher.execute(registry.cmdlist.get("thread"))
        assert seen == [True]
        assert not notifications.user_selected_context

    def test_restored_on_error(self, registry, dispatcher, notifications):
        """The flag is restored when the command fails."""
        node = registry.insert_suppress_notification(
            "thread", CommandClass.RUN, "doc", failing_handler(UsageError("no thread")), "user_selected_context"
        )
        with pytest.raises(UsageError):
            dispatcher.execute(node)
        assert not notifications.user_selected_context

    def test_previous_value_kept(self, dispatcher, notifications):
        """An already raised flag stays raised."""
        notifications.user_selected_context = True
        with dispatcher.suppress_notification("user_selected_context"):
            pass
        assert notifications.user_selected_context


class TestHooks:
    """Pre and post hooks."""

    @pytest.fixture
    def hooked(self, registry):
        """A "stop" command with both hooks, all recording in one log."""
        log = []
        node = registry.add_com("stop", CommandClass.RUN, Recorder("stop", log), "doc")
        registry.add_hook(node, registry.add_com("hook-stop", CommandClass.USER, Recorder("pre", log), "doc"))
        registry.add_hook(node, registry.add_com("hookpost-stop", CommandClass.USER, Recorder("post", log), "doc"), post=True)
        return node, log

    def test_order(self, dispatcher, hooked):
        """The pre hook, the command, then the post hook run."""
        node, log = hooked
        dispatcher.run_pre_hook(node)
        dispatcher.execute(node)
        dispatcher.run_post_hook(node)
        assert log == ["pre", "stop", "post"]

    def test_no_hook(self, registry, dispatcher):
        """Commands without hooks are fine."""
        node = registry.add_com("plain", CommandClass.RUN, Recorder(), "doc")
        dispatcher.run_pre_hook(node)
        dispatcher.run_post_hook(node)

    def test_reentrancy(self, registry, dispatcher):
        """A hook running its own command does not trigger the hooks again."""
        log = []
        node = registry.add_com("stop", CommandClass.RUN, Recorder("stop", log), "doc")

        def pre_hook(args, from_tty):
            log.append("pre")
            dispatcher.run_pre_hook(node)
            dispatcher.run_post_hook(node)
            dispatcher.execute(node)

        registry.add_hook(node, registry.add_com("hook-stop", CommandClass.USER, pre_hook, "doc"))
        registry.add_hook(node, registry.add_com("hookpost-stop", CommandClass.USER, Recorder("post", log), "doc"), post=True)
        dispatcher.run_pre_hook(node)
        assert log == ["pre", "stop"]
        assert not node.hook_in

    def test_hook_error(self, registry, dispatcher):
        """Hook errors propagate and the marker is cleared."""
        node = registry.add_com("stop", CommandClass.RUN, Recorder(), "doc")
        registry.add_hook(node, registry.add_com("hook-stop", CommandClass.USER, failing_handler(UsageError("hook failed")), "doc"))
        with pytest.raises(UsageError, match="hook failed"):
            dispatcher.run_pre_hook(node)
        assert not node.hook_in


class TestDeprecatedWarning:
    """Warnings for deprecated commands and aliases."""

    def test_not_deprecated(self, registry, dispatcher, output):
        """Nothing is written for current commands."""
        registry.add_com("step", CommandClass.RUN, Recorder(), "doc")
        dispatcher.deprecated_cmd_warning("step", registry.cmdlist)
        assert output.getvalue() == ""

    def test_command(self, registry, dispatcher, output):
        """A deprecated command names its replacement."""
        registry.deprecate(registry.add_com("old", CommandClass.USER, Recorder(), "doc"), "new")
        dispatcher.deprecated_cmd_warning("old", registry.cmdlist)
        assert output.getvalue() == "Warning: command 'old' is deprecated.\nUse 'new'.\n\n"

    def test_no_replacement(self, registry, dispatcher, output):
        """Without replacement, no alternative is known."""
        registry.deprecate(registry.add_com("old", CommandClass.USER, Recorder(), "doc"))
        dispatcher.deprecated_cmd_warning("old", registry.cmdlist)
        assert output.getvalue() == "Warning: command 'old' is deprecated.\nNo alternative known.\n\n"

    def test_alias(self, registry, dispatcher, output):
        """A deprecated alias of a current command names the command."""
        node = registry.add_com("backtrace", CommandClass.STACK, Recorder(), "doc")
        registry.deprecate(registry.add_com_alias("where", node, CommandClass.STACK), "backtrace")
        dispatcher.deprecated_cmd_warning("where", registry.cmdlist)
        assert output.getvalue() == "Warning: 'where', an alias for the command 'backtrace', is deprecated.\nUse 'backtrace'.\n\n"

    def test_alias_of_deprecated(self, registry, dispatcher, output):
        """Using an alias of a deprecated command names both."""
        node = registry.deprecate(registry.add_com("old", CommandClass.USER, Recorder(), "doc"), "new")
        registry.add_com_alias("o", node, CommandClass.USER)
        dispatcher.deprecated_cmd_warning("o", registry.cmdlist)
        assert output.getvalue() == "Warning: command 'o' (old) is deprecated.\nUse 'new'.\n\n"

    def test_warns_every_time(self, registry, dispatcher, output):
        """The warning is repeated on every use."""
        registry.deprecate(registry.add_com("old", CommandClass.USER, Recorder(), "doc"))
        dispatcher.deprecated_cmd_warning("old", registry.cmdlist)
        dispatcher.deprecated_cmd_warning("old", registry.cmdlist)
        assert output.getvalue().count("is deprecated") == 2
