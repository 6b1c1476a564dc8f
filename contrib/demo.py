"""
termanim demo session

A three-step terminal session that lists a directory, looks someone up and
clears the screen. Written with the Composer so it doubles as a config file:

    termanim -c contrib/demo.py -o out/
    termanim -c contrib/demo.py --debug      # show overlap adjustments

Produces: out/demo.html and out/demo.svg
"""

from termanim import Composer

config = (
    Composer(width=800, height=200, name="demo", loop=True)
    # Directory listing
    .step.terminal_lines(["/PROJECTS", "deno-kit  termanim  dotfiles"])
    .shell_prompt(user="zack", host="machine", symbol=":~$")
    .command("ls")
    .timing(start=1, per_char=0.2, hold=2)
    .done
    # Starts before ls finishes; pushed back to ls end + 0.5s
    .step.terminal_lines(["/LANGUAGES", "Go, TypeScript, Python"])
    .shell_prompt(user="zack", host="machine", symbol="$", path="~/src")
    .command("whois zack")
    .timing(start=3, per_char=0.15, hold=3)
    .done
    .step.shell_prompt(user="zack", host="machine", symbol=":~$")
    .command("clear")
    .timing(start=12, per_char=0.2, hold=1)
    .done
)
