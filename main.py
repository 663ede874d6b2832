from rich.pretty import pprint

from helmsman import *

app = Program("gem", version="1.0.0", description="Install and inspect gems")
app.global_option("--verbose", "Print more while working")

install = app.command("install gem", syntax="gem install gem <name> [version]", summary="Install a gem")
install.option("-f", "--[no-]force", "Overwrite an existing install", default=False)
install.option("--source URL", "Gem server to install from", default="https://rubygems.org")
install.example("Install rake", "gem install gem rake")


@install.when_called
def callback(args, options, config):
    pprint({"args": args, "options": dict(options), "config": config})


app.alias_command("ig", "install gem", "--force")

app.command("sources", descr="Manage the gem servers installs read from")
sources_add = app.command("sources add", syntax="gem sources add <url>", summary="Add a gem server")


@sources_add.when_called
def add_source(args, options, config):
    pprint({"source": args[0]})


if __name__ == '__main__':
    app.run()
