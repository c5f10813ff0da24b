"""Handles interactive/command-line mode for the kial interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """kial interpreter shell."""
    intro = "kial interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary kial statements."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(self._tmp_line + line, self.line_num, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if not line or line.isspace():
                return

            self.sess.add(line, self.line_num)
            self.sess.run()

            if self.sess.results:
                print(self.sess.pop())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return self.default(self.lastcmd)  # 'help' is a valid binding name

        print("Welcome to the kial interpreter!\n\n"
              "kial is a small expression language with bindings, arithmetic, strings and \n"
              "nested blocks. Every line is evaluated and its value printed; bindings \n"
              "persist for the rest of the session.\n\n"
              "Try it out by typing 'let a = 2;'. This will bind 2 to the name 'a'. Next, \n"
              "try typing '{ let a = 3; a * 10 }'. This will give 30, while 'a' on its own \n"
              "still gives 2.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return True

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            return self.default(self.lastcmd)  # 'exit' is a valid binding name
        return True
