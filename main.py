from datetime import timedelta

from rich.pretty import pprint

from pennant import *


class Names(list):
    def __str__(self):
        return ",".join(self)

    def __parse__(self, token, /):
        self.extend(filter(None, token.split(",")))


verbose = flag("verbose", "v", False, "print the parsed state")
retries = flag("retries", "r", 3, "retry `count`")
timeout = flag("timeout", "t", timedelta(seconds=5), "request `duration`")
names = flag("names", "n", Names(), "comma separated `names`")

serve = flagset("serve")
port = setflag(serve, "port", "p", 8080, "listen `port`", kind=Kind.UINT)


if __name__ == '__main__':
    parse()
    if verbose.value:
        pprint(CommandLine)
        CommandLine.visit(lambda identifier, destination: pprint({identifier: destination.value}))
    pprint(args())
