from rich.pretty import pprint

from argot import *

command = Command("copy", "copy 1.0 - copies files around", shell=True)
command.register("verbose", Flag(descr="print every copied file"))
command.register("mode", Set(("fast", "safe"), "safe", descr="copy strategy"))
command.register("retries", Option("3", descr="attempts per file", metavar="COUNT", validator=str.isdigit))
command.register("files", Collection(required=True, descr="files to copy"))
command.alias("verbose", "v")
command.default = "files"
command.example("copy two files verbosely", "-v a.txt b.txt")
command.example("copy with the fast strategy", "/mode:fast a.txt")

command.registry["files"].processor = pprint


if __name__ == '__main__':
    invoke(command)
