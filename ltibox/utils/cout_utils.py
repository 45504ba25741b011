"""Console output

Coloured console writer shared by the package. The writer is quiet until :func:`cout_talk` is called (or the
``print_info`` option is set), so that library code can report what it does without polluting the output of
applications that do not ask for it.

Levels:

    * ``0``: plain text
    * ``1``: blue, detail
    * ``2``: cyan, information
    * ``3``: yellow, warning
    * ``4``: red, error
"""
import os
import textwrap
import colorama


class Writer(object):
    fore_colours = ['', colorama.Fore.BLUE, colorama.Fore.CYAN, colorama.Fore.YELLOW, colorama.Fore.RED]
    reset = colorama.Style.RESET_ALL

    output_columns = 80
    separator = '-'*output_columns

    wrapper = textwrap.TextWrapper(width=output_columns, break_long_words=False)

    def __init__(self):
        self.print_screen = False
        self.print_file = False
        self.file = None
        self.file_route = ''
        self.file_name = ''

    def initialise(self, print_screen, print_file, file_route=None, file_name=None):
        self.print_screen = print_screen
        self.print_file = print_file

        if self.print_file:
            self.file_route = file_route
            self.file_name = file_name
            if not os.path.exists(self.file_route):
                try:
                    os.makedirs(self.file_route)
                except FileExistsError:
                    pass

            self.file = open(os.path.join(self.file_route, self.file_name), 'w')

    def cout_quiet(self):
        self.print_screen = False

    def cout_talk(self):
        self.print_screen = True

    def print_separator(self, level=0):
        self.__call__(self.separator, level)

    def __call__(self, in_line, level=0):
        if level > 4:
            raise AttributeError('Output level cannot be > 4')
        lines = self._wrap(str(in_line))
        if self.print_screen:
            for line in lines:
                print(self.fore_colours[level] + line + self.reset)
        if self.print_file and self.file is not None:
            self.file.write('\n'.join(lines) + '\n')

    def _wrap(self, text):
        lines = []
        for line in text.split('\n'):
            if len(line) > self.output_columns:
                lines.extend(self.wrapper.wrap(line))
            else:
                lines.append(line)
        return lines

    def close(self):
        if self.file is not None:
            if not self.file.closed:
                self.file.close()

    def __del__(self):
        self.close()


cout_wrap = Writer()


def cout_quiet():
    cout_wrap.cout_quiet()


def cout_talk():
    cout_wrap.cout_talk()
