from pyooziejob.client import ServiceError, parse_args
from pyooziejob.errors import JobError
from pyooziejob.job_command import commands, make_job
import argparse
import sys
from requests.exceptions import RequestException

def handle_error(err,verbose=False):
   if err.status_code==401:
      sys.stderr.write('Unauthorized (401)\n')
   elif err.status_code==403:
      sys.stderr.write('Forbidden (403)\n')
   elif err.status_code==404:
      sys.stderr.write('Not found (404)\n')
   else:
      sys.stderr.write('Status ({})\n'.format(err.status_code))
   sys.stderr.write(err.message)
   sys.stderr.write('\n')
   if verbose and err.request is not None:
      sys.stderr.write(err.request.text)
      sys.stderr.write('\n')

def main(argv=None):
   args = parse_args(
      argv if argv is not None else sys.argv[1:],
      prog='pyooziejob',
      description="Oozie job client",
      arguments=[('command',{'nargs':argparse.REMAINDER,'help':'The command: {}'.format(', '.join(commands.keys()))})])

   if len(args.command)==0:
      sys.stderr.write('One of the following commands must be specified: {}\n'.format(' '.join(commands.keys())))
      return 1

   func = commands.get(args.command[0])
   if func is None:
      sys.stderr.write('Unrecognized command: {}\n'.format(args.command[0]))
      return 1

   try:
      with make_job(args) as client:
         func(client,args.command[1:])
   except ServiceError as err:
      handle_error(err,verbose=args.verbose)
      return 1
   except (JobError,ValueError,OSError) as err:
      sys.stderr.write(str(err))
      sys.stderr.write('\n')
      return 1
   except RequestException as err:
      sys.stderr.write(str(err))
      sys.stderr.write('\n')
      return 1
   return 0

if __name__ == '__main__':
   sys.exit(main())
